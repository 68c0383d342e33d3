"""
Wallet API endpoints.

The API layer is thin. It handles HTTP concerns (status codes,
response formatting) and delegates money movement to the
LedgerEngine and reads to the WalletService.

The caller's identity arrives in the X-Owner-Id header, set by
the authentication gateway in front of this service.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from wallet_ledger.api.errors import to_http_error
from wallet_ledger.exceptions import WalletError
from wallet_ledger.models.base import get_db
from wallet_ledger.models.enums import TransactionType, TransactionStatus
from wallet_ledger.schemas.account import (
    AccountBalanceResponse,
    AccountSummaryResponse,
)
from wallet_ledger.schemas.transaction import (
    FundRequest,
    WithdrawRequest,
    TransferRequest,
    LedgerOperationResponse,
    TransactionResponse,
    TransactionHistoryResponse,
    PaginationResponse,
)
from wallet_ledger.services.ledger_engine import LedgerEngine, LedgerResult
from wallet_ledger.services.transaction_store import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    TransactionFilters,
)
from wallet_ledger.services.wallet_service import WalletService

router = APIRouter(prefix="/wallet", tags=["Wallet"])


def get_owner_id(x_owner_id: int = Header(..., gt=0)) -> int:
    """Owner id of the authenticated caller."""
    return x_owner_id


def to_response(result: LedgerResult) -> LedgerOperationResponse:
    return LedgerOperationResponse(
        transaction=TransactionResponse.model_validate(result.transaction),
        new_balance=result.new_balance,
    )


# --- Money movement ---

@router.post("/fund", response_model=LedgerOperationResponse, status_code=201)
def fund(
    request: FundRequest,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Add money to the caller's wallet."""
    engine = LedgerEngine(db)
    try:
        result = engine.fund(owner_id, request.amount, request.description)
    except WalletError as e:
        raise to_http_error(e)
    return to_response(result)


@router.post("/withdraw", response_model=LedgerOperationResponse, status_code=201)
def withdraw(
    request: WithdrawRequest,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Take money out of the caller's wallet."""
    engine = LedgerEngine(db)
    try:
        result = engine.withdraw(owner_id, request.amount, request.description)
    except WalletError as e:
        raise to_http_error(e)
    return to_response(result)


@router.post("/transfer", response_model=LedgerOperationResponse, status_code=201)
def transfer(
    request: TransferRequest,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Send money to another wallet by account number.

    Returns the sender's DEBIT leg and new balance.
    """
    engine = LedgerEngine(db)
    try:
        result = engine.transfer(
            owner_id,
            request.recipient_account_number,
            request.amount,
            request.description,
        )
    except WalletError as e:
        raise to_http_error(e)
    return to_response(result)


# --- Reads ---

@router.get("/balance", response_model=AccountBalanceResponse)
def get_balance(
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    service = WalletService(db)
    try:
        return service.get_balance(owner_id)
    except WalletError as e:
        raise to_http_error(e)


@router.get("/transactions", response_model=TransactionHistoryResponse)
def get_transactions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    transaction_type: TransactionType | None = Query(default=None, alias="type"),
    status: TransactionStatus | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Paginated transaction history, newest first."""
    service = WalletService(db)
    filters = TransactionFilters(
        transaction_type=transaction_type,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
    try:
        transactions, pagination = service.get_transaction_history(
            owner_id, page, limit, filters
        )
    except WalletError as e:
        raise to_http_error(e)

    return TransactionHistoryResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        pagination=PaginationResponse.model_validate(pagination),
    )


@router.get("/transactions/{reference}", response_model=TransactionResponse)
def get_transaction(
    reference: str,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    service = WalletService(db)
    try:
        return service.get_transaction_by_reference(owner_id, reference)
    except WalletError as e:
        raise to_http_error(e)


@router.get("/summary", response_model=AccountSummaryResponse)
def get_summary(
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Balance plus totals over completed transactions."""
    service = WalletService(db)
    try:
        return service.get_account_summary(owner_id)
    except WalletError as e:
        raise to_http_error(e)
