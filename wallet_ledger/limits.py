"""
Amount limits per operation class.

Funding, transfers and withdrawals each have their own inclusive
[min, max] range. The ranges are read from Settings and injected
into the LedgerEngine, so tests and deployments can change them
without touching engine code.
"""

from dataclasses import dataclass
from decimal import Decimal

from wallet_ledger.config import Settings, get_settings
from wallet_ledger.models.enums import OperationClass


@dataclass(frozen=True)
class AmountRange:
    """Inclusive amount limits for one operation class."""
    min_amount: Decimal
    max_amount: Decimal

    def __post_init__(self):
        if self.min_amount <= 0:
            raise ValueError("min_amount must be positive")
        if self.max_amount < self.min_amount:
            raise ValueError("max_amount must not be below min_amount")


AmountLimits = dict[OperationClass, AmountRange]


def amount_limits_from_settings(settings: Settings | None = None) -> AmountLimits:
    """Build the per-operation-class limits from application settings."""
    settings = settings or get_settings()
    return {
        OperationClass.FUNDING: AmountRange(
            settings.FUNDING_MIN_AMOUNT, settings.FUNDING_MAX_AMOUNT
        ),
        OperationClass.TRANSFER: AmountRange(
            settings.TRANSFER_MIN_AMOUNT, settings.TRANSFER_MAX_AMOUNT
        ),
        OperationClass.WITHDRAWAL: AmountRange(
            settings.WITHDRAWAL_MIN_AMOUNT, settings.WITHDRAWAL_MAX_AMOUNT
        ),
    }
