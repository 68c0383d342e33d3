"""
Pydantic schemas for wallet money movement and history.

These define the request/response contract of the HTTP layer.
Amount ranges are deliberately not repeated here: the
LedgerEngine owns them, so a limit change is made in one place.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from wallet_ledger.models.enums import TransactionType, TransactionStatus


# --- Request Schemas ---

class FundRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    description: str | None = Field(default=None, max_length=255)


class WithdrawRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    description: str | None = Field(default=None, max_length=255)


class TransferRequest(BaseModel):
    recipient_account_number: str = Field(pattern=r"^\d{10}$")
    amount: Decimal = Field(gt=0, decimal_places=2)
    description: str | None = Field(default=None, max_length=255)


# --- Response Schemas ---

class TransactionResponse(BaseModel):
    id: int
    account_id: int
    transaction_type: TransactionType
    amount: Decimal
    counterparty_account_id: int | None
    reference: str
    transfer_id: uuid.UUID | None
    status: TransactionStatus
    description: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LedgerOperationResponse(BaseModel):
    """Response after funding, withdrawing or transferring."""
    transaction: TransactionResponse
    new_balance: Decimal

    model_config = {"from_attributes": True}


class PaginationResponse(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_previous_page: bool
    next_page: int | None
    previous_page: int | None

    model_config = {"from_attributes": True}


class TransactionHistoryResponse(BaseModel):
    transactions: list[TransactionResponse]
    pagination: PaginationResponse
