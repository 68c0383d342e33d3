"""
Typed exceptions for the wallet ledger.

Callers catch by type, not by parsing messages. Every exception
carries a machine-readable ``code`` and the HTTP status the API
layer should answer with, so the mapping lives in one place.

    WalletError (base)
    |
    +-- ValidationError
    |   +-- SelfTransferError
    |   +-- InvalidStatusTransitionError
    +-- NotFoundError
    +-- AccountNotActiveError
    +-- InsufficientFundsError
    +-- ConflictError
    +-- ReferenceExhaustedError
    +-- InternalError
"""

from decimal import Decimal


class WalletError(Exception):
    """Base class for every error raised by the wallet ledger."""

    code: str = "WALLET_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WalletError):
    """Amount out of range, malformed identifier, or a rejected request."""

    code = "VALIDATION_ERROR"
    status_code = 400


class SelfTransferError(ValidationError):
    code = "SELF_TRANSFER"

    def __init__(self, message: str = "Cannot transfer funds to the same account"):
        super().__init__(message)


class InvalidStatusTransitionError(ValidationError):
    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot transition from {current} to {requested}")
        self.current = current
        self.requested = requested


class NotFoundError(WalletError):
    code = "NOT_FOUND"
    status_code = 404


class AccountNotActiveError(WalletError):
    code = "ACCOUNT_NOT_ACTIVE"
    status_code = 403

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.status = status


class InsufficientFundsError(WalletError):
    """The balance cannot cover the requested amount."""

    code = "INSUFFICIENT_FUNDS"
    status_code = 400

    def __init__(self, available_balance: Decimal, requested: Decimal | None = None):
        super().__init__(
            f"Insufficient funds. Available balance: {available_balance:.2f}"
        )
        self.available_balance = available_balance
        self.requested = requested


class ConflictError(WalletError):
    """A uniqueness constraint (reference, account number, owner) was violated."""

    code = "CONFLICT"
    status_code = 409


class ReferenceExhaustedError(WalletError):
    """
    No unique transaction reference could be drawn.

    This is an internal condition, not a user input error. The
    enclosing operation is aborted and nothing is committed, so
    the whole request is safe to retry.
    """

    code = "REFERENCE_EXHAUSTED"
    status_code = 500

    def __init__(self, attempts: int):
        super().__init__(
            f"Could not generate a unique transaction reference "
            f"after {attempts} attempts"
        )
        self.attempts = attempts


class InternalError(WalletError):
    """Storage unavailable or an unexpected driver error."""

    code = "INTERNAL_ERROR"
    status_code = 500
