"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from wallet_ledger.models.base import Base
from wallet_ledger.models.enums import (
    AccountStatus,
    TransactionType,
    TransactionStatus,
    OperationClass,
)
from wallet_ledger.models.account import Account
from wallet_ledger.models.transaction import Transaction

__all__ = [
    "Base",
    "AccountStatus",
    "TransactionType",
    "TransactionStatus",
    "OperationClass",
    "Account",
    "Transaction",
]
