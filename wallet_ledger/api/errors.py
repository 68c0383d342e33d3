"""
Mapping from wallet errors to HTTP responses.

Every router answers a WalletError the same way: the error's own
status code, with ``{"code": ..., "message": ...}`` as the detail.
"""

from fastapi import HTTPException

from wallet_ledger.exceptions import WalletError


def to_http_error(error: WalletError) -> HTTPException:
    return HTTPException(
        status_code=error.status_code,
        detail={"code": error.code, "message": error.message},
    )
