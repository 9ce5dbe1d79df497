"""Cart pricing, storage and session settings read from the environment."""
import os
from decimal import Decimal, InvalidOperation

from techmart.logging import get_logger

logger = get_logger(__name__)


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return Decimal(default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return Decimal(default)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default


# Derived totals
TAX_RATE = _env_decimal("TECHMART_TAX_RATE", "0.10")
FREE_SHIPPING_THRESHOLD = _env_decimal("TECHMART_FREE_SHIPPING_THRESHOLD", "50")
SHIPPING_FEE = _env_decimal("TECHMART_SHIPPING_FEE", "10")

# Cart persistence (0 = stored carts never expire)
CART_TTL_SECONDS = _env_int("TECHMART_CART_TTL_SECONDS", 0)
STORAGE_TIMEOUT_SECONDS = _env_int("TECHMART_STORAGE_TIMEOUT", 5)

# Login sessions
SESSION_TTL_DAYS = _env_int("TECHMART_SESSION_TTL_DAYS", 7)

# In-memory cart managers unused this long are dropped (0 = keep until logout)
CART_IDLE_SECONDS = _env_int("TECHMART_CART_IDLE_SECONDS", 3600)
