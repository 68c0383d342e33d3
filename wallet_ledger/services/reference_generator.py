"""
Reference generator: customer-facing transaction references.

References are opaque strings printed on receipts, so they cannot
be auto-increment ids. Each candidate is drawn fresh and probed
against the transaction store; on collision another candidate is
drawn, up to a configured number of attempts.

The outcome is returned as a ReferenceResult instead of being
signalled with an exception, so the attempt cap and the exhausted
path are part of the return contract. The unique constraint on
transactions.reference stays the final authority.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Callable

from wallet_ledger.config import get_settings
from wallet_ledger.services.transaction_store import TransactionStore
from wallet_ledger.logging_config import get_logger

logger = get_logger("services.reference_generator")


@dataclass(frozen=True)
class ReferenceResult:
    reference: str | None
    attempts: int

    @property
    def exhausted(self) -> bool:
        return self.reference is None


def random_reference(prefix: str) -> str:
    """
    Build a candidate like ``TXN1735689600000A1B2C3D4E5F6``.

    Epoch milliseconds keep references roughly sortable; the
    uuid4-derived suffix makes each draw independent.
    """
    millis = int(time.time() * 1000)
    return f"{prefix}{millis}{uuid.uuid4().hex[:12].upper()}"


class ReferenceGenerator:

    def __init__(
        self,
        transactions: TransactionStore,
        max_attempts: int | None = None,
        prefix: str | None = None,
        candidate_factory: Callable[[], str] | None = None,
    ):
        settings = get_settings()
        self.transactions = transactions
        self.max_attempts = (
            max_attempts if max_attempts is not None
            else settings.REFERENCE_MAX_ATTEMPTS
        )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.prefix = prefix if prefix is not None else settings.TRANSACTION_REF_PREFIX
        self.candidate_factory = candidate_factory or (
            lambda: random_reference(self.prefix)
        )

    def next(self) -> ReferenceResult:
        """Draw candidates until one is unused or the attempts run out."""
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.candidate_factory()
            if not self.transactions.exists_by_reference(candidate):
                return ReferenceResult(reference=candidate, attempts=attempt)
            logger.warning(
                "Transaction reference collision",
                extra={"reference": candidate, "attempt": attempt},
            )

        return ReferenceResult(reference=None, attempts=self.max_attempts)
