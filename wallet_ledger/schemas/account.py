"""
Pydantic schemas for account operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from wallet_ledger.models.enums import AccountStatus


class AccountOpen(BaseModel):
    """Request to open a wallet account for an onboarded owner."""
    owner_id: int = Field(gt=0)
    account_number: str | None = Field(default=None, pattern=r"^\d{10}$")


class AccountResponse(BaseModel):
    id: int
    owner_id: int
    account_number: str
    balance: Decimal
    status: AccountStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountStatusUpdate(BaseModel):
    """Request to change account status."""
    new_status: AccountStatus
    reason: str = Field(min_length=1, max_length=255)


class AccountBalanceResponse(BaseModel):
    account_number: str
    balance: Decimal
    status: AccountStatus

    model_config = {"from_attributes": True}


class AccountSummaryResponse(BaseModel):
    account_number: str
    balance: Decimal
    total_credits: Decimal
    total_debits: Decimal
    transaction_count: int

    model_config = {"from_attributes": True}
