"""
Wallet account model.

Each owner holds exactly one account, identified to other users
by a 10-digit account number. The balance is stored on the row
and only ever changed by AccountStore.adjust_balance inside a
ledger unit of work.

The account has a state machine governing its lifecycle.
Invalid state transitions are rejected. Accounts are never
deleted.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, Integer, CheckConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from wallet_ledger.models.base import Base
from wallet_ledger.models.enums import AccountStatus


# Valid state transitions, the source of truth for the state machine
VALID_TRANSITIONS: dict[AccountStatus, set[AccountStatus]] = {
    AccountStatus.ACTIVE: {AccountStatus.INACTIVE, AccountStatus.SUSPENDED},
    AccountStatus.INACTIVE: {AccountStatus.ACTIVE, AccountStatus.SUSPENDED},
    AccountStatus.SUSPENDED: {AccountStatus.ACTIVE, AccountStatus.INACTIVE},
}


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        Integer, unique=True, nullable=False, index=True
    )
    account_number: Mapped[str] = mapped_column(
        String(10), unique=True, nullable=False, index=True
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )
    status: Mapped[AccountStatus] = mapped_column(
        SAEnum(
            AccountStatus,
            name="account_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=AccountStatus.ACTIVE,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def can_transition_to(self, new_status: AccountStatus) -> bool:
        """Check if a state transition is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __repr__(self) -> str:
        return f"<Account {self.account_number} ({self.status.value})>"
