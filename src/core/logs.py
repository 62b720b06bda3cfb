# src/core/logs.py
"""
Logging setup for the CLI and collaborator layers.

- stderr handler at INFO (DEBUG when UNDERWRITE_DEBUG is truthy)
- rotating file log at logs/underwrite.log when UNDERWRITE_DEBUG is truthy
- API keys found in the environment are redacted from every record

The numeric engine (src/core/finance) does not log.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "src"
LOG_PATH = os.path.join("logs", "underwrite.log")
_SECRET_ENV_KEYS = ("OPENAI_API_KEY",)


def debug_enabled() -> bool:
    return os.getenv("UNDERWRITE_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def redact(text: str) -> str:
    for k in _SECRET_ENV_KEYS:
        val = os.getenv(k)
        if val:
            text = text.replace(val, "[REDACTED]")
    return text


class _RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(record.getMessage())
        record.args = None
        return True


def configure_logging(level: int | None = None) -> logging.Logger:
    """Attach handlers to the package root logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    debug = debug_enabled()
    logger.setLevel(level if level is not None else (logging.DEBUG if debug else logging.INFO))

    # Avoid duplicate handlers if reloaded in REPL/tests
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="(%Y-%m-%d %H:%M:%S)")

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    stream.addFilter(_RedactingFilter())
    logger.addHandler(stream)

    if debug:
        try:
            os.makedirs(os.path.dirname(LOG_PATH), exist_ok=True)
            handler = RotatingFileHandler(LOG_PATH, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        except OSError as e:
            logger.warning("file logging disabled: %s", e)
        else:
            handler.setFormatter(formatter)
            handler.addFilter(_RedactingFilter())
            logger.addHandler(handler)

    return logger
