"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid status or
transaction_type is caught at the database level, not just
in Python validation.
"""

import enum


class AccountStatus(str, enum.Enum):
    """Soft lifecycle of a wallet account. Accounts are never deleted."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class TransactionType(str, enum.Enum):
    """Direction of a ledger entry relative to its own account."""
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REVERSED = "REVERSED"


class OperationClass(str, enum.Enum):
    """Category of money movement; selects which amount limits apply."""
    FUNDING = "FUNDING"
    TRANSFER = "TRANSFER"
    WITHDRAWAL = "WITHDRAWAL"
