"""
Concurrent money movement against one account.

Each worker gets its own session, as separate requests would. The
database serializes the conditional balance updates, so no update
is lost and no balance goes below zero.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from wallet_ledger.exceptions import InsufficientFundsError
from wallet_ledger.services.account_store import AccountStore
from wallet_ledger.services.ledger_engine import LedgerEngine
from wallet_ledger.services.transaction_store import TransactionStore

WORKERS = 8


def run_concurrently(session_factory, operation, count):
    """Run ``operation(engine, i)`` for i in range(count) in parallel; return outcomes."""
    def worker(i):
        session = session_factory()
        try:
            return operation(LedgerEngine(session), i)
        except InsufficientFundsError as e:
            return e
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        return list(pool.map(worker, range(count)))


def current_balance(session_factory, account_id):
    session = session_factory()
    try:
        return AccountStore(session).find_by_id(account_id).balance
    finally:
        session.close()


def test_concurrent_funding_loses_no_updates(session_factory, open_account):
    account = open_account(owner_id=1, balance="1000")

    outcomes = run_concurrently(
        session_factory, lambda engine, _: engine.fund(1, Decimal("100")), WORKERS
    )

    assert all(not isinstance(o, Exception) for o in outcomes)
    assert current_balance(session_factory, account.id) == Decimal("1000") + WORKERS * Decimal("100")


def test_concurrent_withdrawals_never_overdraw(session_factory, open_account):
    account = open_account(owner_id=1, balance="500")

    outcomes = run_concurrently(
        session_factory, lambda engine, _: engine.withdraw(1, Decimal("100")), 10
    )

    succeeded = [o for o in outcomes if not isinstance(o, Exception)]
    rejected = [o for o in outcomes if isinstance(o, InsufficientFundsError)]
    assert len(succeeded) == 5
    assert len(rejected) == 5
    assert current_balance(session_factory, account.id) == Decimal("0")


def test_opposite_transfers_conserve_value(session_factory, open_account, db_session):
    a = open_account(owner_id=1, balance="10000")
    b = open_account(owner_id=2, balance="10000")
    a_number, b_number = a.account_number, b.account_number

    def opposite(engine, i):
        if i % 2 == 0:
            return engine.transfer(1, b_number, Decimal("50"))
        return engine.transfer(2, a_number, Decimal("30"))

    outcomes = run_concurrently(session_factory, opposite, WORKERS)

    assert all(not isinstance(o, Exception) for o in outcomes)
    total = current_balance(session_factory, a.id) + current_balance(session_factory, b.id)
    assert total == Decimal("20000")

    transactions = TransactionStore(db_session)
    for account_id in (a.id, b.id):
        summary = transactions.summarize(account_id)
        assert current_balance(session_factory, account_id) == (
            summary.total_credits - summary.total_debits
        )
