"""
Account API endpoints.

Opening an account normally happens during user onboarding, which
lives outside this service; these endpoints let the onboarding
flow and operators create accounts and change their status.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wallet_ledger.api.errors import to_http_error
from wallet_ledger.exceptions import NotFoundError, WalletError
from wallet_ledger.models.base import get_db
from wallet_ledger.services.account_store import AccountStore
from wallet_ledger.schemas.account import (
    AccountOpen,
    AccountResponse,
    AccountStatusUpdate,
)
from wallet_ledger.logging_config import get_logger

router = APIRouter(tags=["Accounts"])

logger = get_logger("api.accounts")


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def open_account(
    request: AccountOpen,
    db: Session = Depends(get_db),
):
    """
    Open a wallet account for an owner.

    The account starts ACTIVE with a zero balance. An account
    number is generated unless one is supplied.
    """
    store = AccountStore(db)
    try:
        account = store.create(request.owner_id, request.account_number)
        db.commit()
        return account
    except WalletError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Get account details."""
    account = AccountStore(db).find_by_id(account_id)
    if not account:
        raise to_http_error(NotFoundError(f"Account {account_id} not found"))
    return account


@router.patch(
    "/accounts/{account_id}/status",
    response_model=AccountResponse,
)
def change_account_status(
    account_id: int,
    request: AccountStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Change account status.

    Enforces the state machine; only valid transitions
    are allowed.
    """
    store = AccountStore(db)
    try:
        account = store.update_status(account_id, request.new_status)
        db.commit()
    except WalletError as e:
        db.rollback()
        raise to_http_error(e)

    logger.info(
        "Account status changed",
        extra={
            "account_id": account_id,
            "new_status": request.new_status.value,
            "reason": request.reason,
        },
    )
    return account
