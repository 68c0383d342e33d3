"""Business logic services."""

from wallet_ledger.services.account_store import AccountStore
from wallet_ledger.services.transaction_store import TransactionStore
from wallet_ledger.services.reference_generator import ReferenceGenerator
from wallet_ledger.services.ledger_engine import LedgerEngine, LedgerResult
from wallet_ledger.services.wallet_service import WalletService

__all__ = [
    "AccountStore",
    "TransactionStore",
    "ReferenceGenerator",
    "LedgerEngine",
    "LedgerResult",
    "WalletService",
]
