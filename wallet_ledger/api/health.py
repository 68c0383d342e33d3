"""
Health check endpoint.

Used by load balancers and monitoring to verify the service is
running and can reach its database. Without the database no
money can move, so an unreachable database reports "degraded".
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wallet_ledger.config import get_settings
from wallet_ledger.models.base import get_db
from wallet_ledger.logging_config import get_logger

router = APIRouter(tags=["Health"])

logger = get_logger("api.health")


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Return service status, version and database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "wallet-ledger",
        "version": get_settings().APP_VERSION,
        "database": db_status,
    }
