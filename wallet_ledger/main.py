"""
Wallet Ledger: FastAPI Application.

This is the entry point for the application.
Logging is configured and all routers are registered here.
"""

from fastapi import FastAPI

from wallet_ledger.config import get_settings
from wallet_ledger.logging_config import get_logger, setup_logging
from wallet_ledger.api.health import router as health_router
from wallet_ledger.api.accounts import router as accounts_router
from wallet_ledger.api.wallet import router as wallet_router

settings = get_settings()

setup_logging(settings.LOG_LEVEL)
logger = get_logger("main")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Wallet backend: funding, transfers and withdrawals "
                "with strict balance consistency",
    debug=settings.DEBUG,
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(wallet_router)

logger.info(
    "Application configured",
    extra={"environment": settings.ENVIRONMENT, "version": settings.APP_VERSION},
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
