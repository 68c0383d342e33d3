"""
Structured logging configuration.

Log records are emitted as one JSON object per line. Structured
fields are passed with ``extra={...}`` and land at the top level
of the JSON document.
"""

import json
import logging
from datetime import datetime, timezone

ROOT_LOGGER_NAME = "wallet_ledger"

# Attributes every LogRecord has; anything else came in through extra=
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure JSON logging for the application logger tree.

    Safe to call more than once; existing handlers are replaced
    rather than duplicated.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child of the application logger, e.g. ``services.ledger``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
