"""
Tests for the read-only WalletService.
"""

from decimal import Decimal

import pytest

from wallet_ledger.exceptions import NotFoundError
from wallet_ledger.models.enums import TransactionType
from wallet_ledger.services.ledger_engine import LedgerEngine
from wallet_ledger.services.transaction_store import TransactionFilters
from wallet_ledger.services.wallet_service import WalletService, paginate


class TestPaginate:

    def test_middle_page(self):
        p = paginate(total_count=45, page=2, limit=20)

        assert p.total_pages == 3
        assert p.has_next_page and p.has_previous_page
        assert p.next_page == 3
        assert p.previous_page == 1

    def test_last_page(self):
        p = paginate(total_count=45, page=3, limit=20)

        assert not p.has_next_page
        assert p.next_page is None

    def test_empty(self):
        p = paginate(total_count=0, page=1, limit=20)

        assert p.total_pages == 0
        assert not p.has_next_page
        assert not p.has_previous_page


class TestGetBalance:

    def test_balance(self, db_session, open_account):
        open_account(owner_id=1, balance="1234.56")

        account = WalletService(db_session).get_balance(1)
        assert account.balance == Decimal("1234.56")

    def test_unknown_owner(self, db_session):
        with pytest.raises(NotFoundError):
            WalletService(db_session).get_balance(1)


class TestTransactionHistory:

    def test_history_paginates(self, db_session, open_account):
        open_account(owner_id=1)
        engine = LedgerEngine(db_session)
        for _ in range(5):
            engine.fund(1, Decimal("100"))

        rows, pagination = WalletService(db_session).get_transaction_history(
            1, page=1, limit=2
        )

        assert len(rows) == 2
        assert pagination.total_count == 5
        assert pagination.total_pages == 3
        assert pagination.next_page == 2

    def test_history_filters(self, db_session, open_account):
        open_account(owner_id=1, balance="1000")
        LedgerEngine(db_session).withdraw(1, Decimal("200"))

        rows, pagination = WalletService(db_session).get_transaction_history(
            1, filters=TransactionFilters(transaction_type=TransactionType.DEBIT)
        )

        assert pagination.total_count == 1
        assert rows[0].amount == Decimal("200")


class TestTransactionByReference:

    def test_own_transaction(self, db_session, open_account):
        open_account(owner_id=1)
        result = LedgerEngine(db_session).fund(1, Decimal("100"))
        reference = result.transaction.reference

        found = WalletService(db_session).get_transaction_by_reference(1, reference)
        assert found.reference == reference

    def test_other_owners_transaction_hidden(self, db_session, open_account):
        open_account(owner_id=1)
        open_account(owner_id=2)
        result = LedgerEngine(db_session).fund(1, Decimal("100"))

        with pytest.raises(NotFoundError, match="Transaction not found"):
            WalletService(db_session).get_transaction_by_reference(
                2, result.transaction.reference
            )

    def test_unknown_reference(self, db_session, open_account):
        open_account(owner_id=1)
        with pytest.raises(NotFoundError):
            WalletService(db_session).get_transaction_by_reference(1, "TXN-NOPE")


class TestAccountSummary:

    def test_summary(self, db_session, open_account):
        open_account(owner_id=1, balance="5000")
        b = open_account(owner_id=2)
        engine = LedgerEngine(db_session)
        engine.withdraw(1, Decimal("1000"))
        engine.transfer(1, b.account_number, Decimal("500"))

        summary = WalletService(db_session).get_account_summary(1)

        assert summary.balance == Decimal("3500")
        assert summary.total_credits == Decimal("5000")
        assert summary.total_debits == Decimal("1500")
        assert summary.transaction_count == 3
