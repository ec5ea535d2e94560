"""Helpers for consistent error logging."""

from __future__ import annotations

import logging

__all__ = ["log_exception"]


def log_exception(message: str, exc: BaseException, logger: logging.Logger) -> None:
    """Log ``exc`` and its traceback with ``message`` using ``logger``."""

    logger.error("%s: %s", message, exc, exc_info=exc)
