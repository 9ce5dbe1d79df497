"""
Logging for the TechMart cart and access engines.

One stdout handler on the root logger, configured on first import. Cart
mutations and stock rejections log at INFO, corrupt stored carts and access
denials at WARNING, failed saves at ERROR. Customer and product ids pass
through ``sanitize_id_for_logging`` before they reach a log line.

    from techmart.logging import get_logger, sanitize_id_for_logging

    logger = get_logger(__name__)
    logger.info(f"Cart bound to customer {sanitize_id_for_logging(customer_id)}")
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Vercel stamps each line itself
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Supabase and Upstash clients both go through httpx
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack")

_MAX_ID_LENGTH = 8


def _log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        # pytest or the ASGI server got there first
        return

    level = _log_level()
    on_vercel = os.environ.get("VERCEL") == "1"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if on_vercel else LOG_FORMAT))

    root.setLevel(level)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a techmart module (pass ``__name__``)."""
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    # CWE-117: a crafted id must not start a fake log line
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | int | None) -> str:
    """
    Render a customer, product or actor id for a log line.

    Control characters are escaped and the result is cut to 8 characters.
    Missing ids (anonymous actors, unbound carts) render as "N/A".
    """
    if id_value is None or id_value == "":
        return "N/A"
    return _escape_log_injection(str(id_value))[:_MAX_ID_LENGTH]


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_id_for_logging",
]
