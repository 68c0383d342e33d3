"""
Transaction store: the append-only log of ledger legs.

Rows are inserted by the LedgerEngine inside its unit of work and
are never deleted. The only in-place change allowed is a status
transition out of PENDING.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, func, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wallet_ledger.exceptions import (
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from wallet_ledger.models.transaction import Transaction
from wallet_ledger.models.enums import TransactionType, TransactionStatus

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class TransactionFilters:
    """Optional filters for an account's transaction history."""
    transaction_type: TransactionType | None = None
    status: TransactionStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass(frozen=True)
class TransactionSummary:
    """Aggregates over an account's COMPLETED transactions."""
    total_credits: Decimal
    total_debits: Decimal
    count: int


class TransactionStore:

    def __init__(self, db: Session):
        self.db = db

    def append(self, transaction: Transaction) -> Transaction:
        """
        Insert a transaction row.

        Raises ConflictError if the reference is already taken. The
        caller's unit of work must then be rolled back; the failed
        flush leaves the session unusable until it is.
        """
        self.db.add(transaction)
        try:
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"Transaction reference '{transaction.reference}' already exists"
            ) from e
        return transaction

    def find_by_id(self, transaction_id: int) -> Transaction | None:
        return self.db.get(Transaction, transaction_id)

    def find_by_reference(self, reference: str) -> Transaction | None:
        return self.db.execute(
            select(Transaction).where(Transaction.reference == reference)
        ).scalar_one_or_none()

    def exists_by_reference(self, reference: str) -> bool:
        found = self.db.execute(
            select(Transaction.id).where(Transaction.reference == reference).limit(1)
        ).first()
        return found is not None

    def find_by_transfer(self, transfer_id: uuid.UUID) -> list[Transaction]:
        """Return both legs of a transfer, debit leg first."""
        legs = self.db.execute(
            select(Transaction)
            .where(Transaction.transfer_id == transfer_id)
            .order_by(Transaction.id)
        ).scalars().all()
        return list(legs)

    def find_by_account(
        self,
        account_id: int,
        filters: TransactionFilters | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[Transaction], int]:
        """
        Return one page of an account's transactions, newest first,
        together with the total number of rows matching the filters.
        """
        filters = filters or TransactionFilters()
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        conditions = [Transaction.account_id == account_id]
        if filters.transaction_type:
            conditions.append(Transaction.transaction_type == filters.transaction_type)
        if filters.status:
            conditions.append(Transaction.status == filters.status)
        if filters.start_date:
            conditions.append(Transaction.created_at >= filters.start_date)
        if filters.end_date:
            conditions.append(Transaction.created_at <= filters.end_date)

        total_count = self.db.execute(
            select(func.count(Transaction.id)).where(*conditions)
        ).scalar_one()

        transactions = self.db.execute(
            select(Transaction)
            .where(*conditions)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        ).scalars().all()

        return list(transactions), total_count

    def summarize(self, account_id: int) -> TransactionSummary:
        """Total credits, total debits and row count over COMPLETED rows."""
        credits, debits, count = self.db.execute(
            select(
                func.coalesce(func.sum(case(
                    (Transaction.transaction_type == TransactionType.CREDIT,
                     Transaction.amount),
                    else_=0,
                )), 0),
                func.coalesce(func.sum(case(
                    (Transaction.transaction_type == TransactionType.DEBIT,
                     Transaction.amount),
                    else_=0,
                )), 0),
                func.count(Transaction.id),
            ).where(
                Transaction.account_id == account_id,
                Transaction.status == TransactionStatus.COMPLETED,
            )
        ).one()

        return TransactionSummary(
            total_credits=Decimal(str(credits)).quantize(CENTS),
            total_debits=Decimal(str(debits)).quantize(CENTS),
            count=count,
        )

    def update_status(
        self, transaction_id: int, new_status: TransactionStatus
    ) -> Transaction:
        """
        Move a PENDING transaction to a terminal status.

        Terminal rows (COMPLETED, FAILED, REVERSED) are immutable.
        """
        transaction = self.find_by_id(transaction_id)
        if not transaction:
            raise NotFoundError(f"Transaction {transaction_id} not found")

        if not transaction.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                transaction.status.value, new_status.value
            )

        transaction.status = new_status
        self.db.flush()
        return transaction
