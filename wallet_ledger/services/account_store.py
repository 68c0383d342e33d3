"""
Account store: reads and balance mutations for wallet accounts.

The store takes a database session as a constructor argument and
never commits: every mutation joins the caller's unit of work.

Balances are changed with a single conditional UPDATE
(balance = balance + delta) rather than read-modify-write in
Python. The database row lock serializes concurrent writers, and
the WHERE clause re-checks the floor against the locked row, so
two transfers debiting the same account can never both spend the
same money.
"""

import secrets
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wallet_ledger.config import get_settings
from wallet_ledger.exceptions import (
    AccountNotActiveError,
    ConflictError,
    InsufficientFundsError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from wallet_ledger.models.account import Account
from wallet_ledger.models.enums import AccountStatus
from wallet_ledger.logging_config import get_logger

logger = get_logger("services.account_store")

ACCOUNT_NUMBER_LENGTH = 10


def is_valid_account_number(value: str) -> bool:
    return (
        isinstance(value, str)
        and len(value) == ACCOUNT_NUMBER_LENGTH
        and value.isascii()
        and value.isdigit()
    )


def generate_account_number() -> str:
    """Draw a random 10-digit account number (leading zeros allowed)."""
    return f"{secrets.randbelow(10 ** ACCOUNT_NUMBER_LENGTH):0{ACCOUNT_NUMBER_LENGTH}d}"


class AccountStore:

    def __init__(self, db: Session):
        self.db = db

    # --- Reads ---

    def find_by_id(self, account_id: int) -> Account | None:
        return self.db.get(Account, account_id)

    def find_by_owner(self, owner_id: int) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.owner_id == owner_id)
        ).scalar_one_or_none()

    def find_by_account_number(self, account_number: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.account_number == account_number)
        ).scalar_one_or_none()

    def get_by_owner(self, owner_id: int) -> Account:
        """Like find_by_owner, but a missing account is an error."""
        account = self.find_by_owner(owner_id)
        if not account:
            raise NotFoundError("Account not found")
        return account

    # --- Onboarding ---

    def create(
        self,
        owner_id: int,
        account_number: str | None = None,
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> Account:
        """
        Create the owner's wallet account with a zero balance.

        If no account number is supplied, random numbers are drawn
        until an unused one is found, up to ACCOUNT_NUMBER_MAX_ATTEMPTS
        draws. The unique constraint on account_number remains the
        final authority.
        """
        if self.find_by_owner(owner_id):
            raise ConflictError(f"Owner {owner_id} already has an account")

        if account_number is not None:
            if not is_valid_account_number(account_number):
                raise ValidationError("Account number must be exactly 10 digits")
            if self.find_by_account_number(account_number):
                raise ConflictError(
                    f"Account number '{account_number}' already exists"
                )
        else:
            account_number = self._draw_account_number()

        account = Account(
            owner_id=owner_id,
            account_number=account_number,
            balance=Decimal("0.00"),
            status=status,
        )
        self.db.add(account)
        try:
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError("Account owner or number already exists") from e
        return account

    def _draw_account_number(self) -> str:
        max_attempts = get_settings().ACCOUNT_NUMBER_MAX_ATTEMPTS
        for _ in range(max_attempts):
            candidate = generate_account_number()
            if not self.find_by_account_number(candidate):
                return candidate
        raise ConflictError(
            f"Could not generate a unique account number "
            f"after {max_attempts} attempts"
        )

    # --- Mutations ---

    def adjust_balance(
        self,
        account_id: int,
        delta: Decimal,
        expected_min_balance: Decimal = Decimal("0"),
    ) -> Decimal:
        """
        Atomically add ``delta`` (negative to debit) to the balance.

        Executes as one statement:

            UPDATE accounts
               SET balance = balance + :delta
             WHERE id = :id AND status = 'ACTIVE'
               AND balance + :delta >= :min

        The status is re-checked against the locked row, so an account
        suspended after the caller loaded it cannot move money.

        If no row matches, the account is missing (NotFound), no
        longer ACTIVE (AccountNotActive), or would fall below
        ``expected_min_balance`` (InsufficientFunds, carrying the
        current balance).

        Returns the new balance as seen inside the caller's
        transaction. Any identity-mapped Account for this id is
        refreshed so callers never read a stale balance.
        """
        result = self.db.execute(
            update(Account)
            .where(
                Account.id == account_id,
                Account.status == AccountStatus.ACTIVE,
                Account.balance + delta >= expected_min_balance,
            )
            .values(
                balance=Account.balance + delta,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            row = self.db.execute(
                select(Account.balance, Account.status).where(Account.id == account_id)
            ).one_or_none()
            if row is None:
                raise NotFoundError(f"Account {account_id} not found")
            current, status = row
            if status != AccountStatus.ACTIVE:
                raise AccountNotActiveError("Account is not active", status.value)
            raise InsufficientFundsError(
                available_balance=Decimal(current), requested=-delta
            )

        account = self.db.execute(
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True)
        ).scalar_one()

        logger.debug(
            "Balance adjusted",
            extra={
                "account_id": account_id,
                "delta": str(delta),
                "balance": str(account.balance),
            },
        )
        return account.balance

    def update_status(self, account_id: int, new_status: AccountStatus) -> Account:
        """
        Transition an account to a new status.

        Enforces the state machine; only valid transitions
        are allowed.
        """
        account = self.find_by_id(account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")

        if not account.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                account.status.value, new_status.value
            )

        account.status = new_status
        self.db.flush()
        return account
