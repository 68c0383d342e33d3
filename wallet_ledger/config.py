"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Wallet Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/wallet_ledger"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Amount limits per operation class (see wallet_ledger.limits)
    FUNDING_MIN_AMOUNT: Decimal = Decimal(os.getenv("FUNDING_MIN_AMOUNT", "100"))
    FUNDING_MAX_AMOUNT: Decimal = Decimal(os.getenv("FUNDING_MAX_AMOUNT", "1000000"))
    TRANSFER_MIN_AMOUNT: Decimal = Decimal(os.getenv("TRANSFER_MIN_AMOUNT", "10"))
    TRANSFER_MAX_AMOUNT: Decimal = Decimal(os.getenv("TRANSFER_MAX_AMOUNT", "500000"))
    WITHDRAWAL_MIN_AMOUNT: Decimal = Decimal(os.getenv("WITHDRAWAL_MIN_AMOUNT", "100"))
    WITHDRAWAL_MAX_AMOUNT: Decimal = Decimal(os.getenv("WITHDRAWAL_MAX_AMOUNT", "200000"))

    # Transaction references
    REFERENCE_MAX_ATTEMPTS: int = int(os.getenv("REFERENCE_MAX_ATTEMPTS", "3"))
    TRANSACTION_REF_PREFIX: str = os.getenv("TRANSACTION_REF_PREFIX", "TXN")

    # Account numbers
    ACCOUNT_NUMBER_MAX_ATTEMPTS: int = int(os.getenv("ACCOUNT_NUMBER_MAX_ATTEMPTS", "5"))


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()
