"""
Wallet service: read-only views over an owner's wallet.

Balance, paginated history, lookup by reference and summaries.
Nothing here mutates state; money movement lives in LedgerEngine.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from wallet_ledger.exceptions import NotFoundError
from wallet_ledger.models.account import Account
from wallet_ledger.models.transaction import Transaction
from wallet_ledger.services.account_store import AccountStore
from wallet_ledger.services.transaction_store import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    TransactionFilters,
    TransactionStore,
)


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_previous_page: bool
    next_page: int | None
    previous_page: int | None


@dataclass(frozen=True)
class AccountSummary:
    account_number: str
    balance: Decimal
    total_credits: Decimal
    total_debits: Decimal
    transaction_count: int


def paginate(total_count: int, page: int, limit: int) -> Pagination:
    """Build page metadata for a result set of ``total_count`` rows."""
    total_pages = math.ceil(total_count / limit) if limit else 0
    has_next = page < total_pages
    has_previous = page > 1
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_count=total_count,
        has_next_page=has_next,
        has_previous_page=has_previous,
        next_page=page + 1 if has_next else None,
        previous_page=page - 1 if has_previous else None,
    )


class WalletService:

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountStore(db)
        self.transactions = TransactionStore(db)

    def get_balance(self, owner_id: int) -> Account:
        """Return the owner's account; its balance is stored on the row."""
        return self.accounts.get_by_owner(owner_id)

    def get_transaction_history(
        self,
        owner_id: int,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        filters: TransactionFilters | None = None,
    ) -> tuple[list[Transaction], Pagination]:
        account = self.accounts.get_by_owner(owner_id)

        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        transactions, total_count = self.transactions.find_by_account(
            account.id, filters, page, limit
        )
        return transactions, paginate(total_count, page, limit)

    def get_transaction_by_reference(
        self, owner_id: int, reference: str
    ) -> Transaction:
        """
        Look up one of the owner's transactions by reference.

        A reference belonging to someone else's account is reported
        as not found, so references cannot be probed across owners.
        """
        account = self.accounts.get_by_owner(owner_id)

        transaction = self.transactions.find_by_reference(reference)
        if not transaction or transaction.account_id != account.id:
            raise NotFoundError("Transaction not found")
        return transaction

    def get_account_summary(self, owner_id: int) -> AccountSummary:
        account = self.accounts.get_by_owner(owner_id)
        summary = self.transactions.summarize(account.id)
        return AccountSummary(
            account_number=account.account_number,
            balance=account.balance,
            total_credits=summary.total_credits,
            total_debits=summary.total_debits,
            transaction_count=summary.count,
        )
