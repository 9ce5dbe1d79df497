"""
Cart persistence adapters.

Each customer's cart is stored as one JSON array under a customer-scoped
key and replaced whole on every save. Last write wins across sessions.
"""
import asyncio
import json
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from techmart import config
from techmart.db import get_redis, RedisKeys
from techmart.errors import PersistenceFailure
from techmart.logging import get_logger, sanitize_id_for_logging
from .models import CartLine

logger = get_logger(__name__)


def encode_lines(lines: List[CartLine]) -> str:
    return json.dumps([line.to_dict() for line in lines])


def decode_lines(customer_id, payload: Optional[str]) -> List[CartLine]:
    """Parse a stored payload. Missing or corrupt data reads as an empty cart."""
    if not payload:
        return []
    try:
        data = json.loads(payload)
        if not isinstance(data, list):
            raise TypeError(f"expected a list, got {type(data).__name__}")
        return [CartLine.from_dict(item) for item in data]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(
            f"Corrupted cart data for customer {sanitize_id_for_logging(customer_id)}: {e}"
        )
        return []


class CartStorage(ABC):
    """Durable, customer-scoped storage of cart lines."""

    @abstractmethod
    async def load(self, customer_id) -> List[CartLine]:
        """Stored lines for ``customer_id``, [] when absent or unreadable."""

    @abstractmethod
    async def save(self, customer_id, lines: List[CartLine]) -> None:
        """Replace the stored lines for ``customer_id``. Raises PersistenceFailure."""


class RedisCartStorage(CartStorage):
    """Upstash Redis storage, one key per customer."""

    def __init__(self, redis=None, ttl_seconds: Optional[int] = None, timeout: Optional[float] = None):
        self._redis = redis  # Lazy initialization
        self.ttl_seconds = config.CART_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.timeout = config.STORAGE_TIMEOUT_SECONDS if timeout is None else timeout

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self, customer_id) -> List[CartLine]:
        key = RedisKeys.cart_key(customer_id)
        try:
            payload = await asyncio.wait_for(self.redis.get(key), timeout=self.timeout)
        except Exception as e:
            logger.error(
                f"Failed to load cart for customer {sanitize_id_for_logging(customer_id)}: {e}"
            )
            raise PersistenceFailure(customer_id) from e
        return decode_lines(customer_id, payload)

    async def save(self, customer_id, lines: List[CartLine]) -> None:
        key = RedisKeys.cart_key(customer_id)
        payload = encode_lines(lines)
        try:
            if self.ttl_seconds > 0:
                write = self.redis.set(key, payload, ex=self.ttl_seconds)
            else:
                write = self.redis.set(key, payload)
            await asyncio.wait_for(write, timeout=self.timeout)
        except Exception as e:
            logger.error(
                f"Failed to save cart for customer {sanitize_id_for_logging(customer_id)}: {e}"
            )
            raise PersistenceFailure(customer_id) from e


class InMemoryCartStorage(CartStorage):
    """Process-local storage holding the same JSON payloads Redis would."""

    def __init__(self):
        self._payloads: Dict[str, str] = {}

    async def load(self, customer_id) -> List[CartLine]:
        return decode_lines(customer_id, self._payloads.get(RedisKeys.cart_key(customer_id)))

    async def save(self, customer_id, lines: List[CartLine]) -> None:
        self._payloads[RedisKeys.cart_key(customer_id)] = encode_lines(lines)

    def raw(self, customer_id) -> Optional[str]:
        return self._payloads.get(RedisKeys.cart_key(customer_id))

    def corrupt(self, customer_id, payload: str = "{not json") -> None:
        """Overwrite the stored payload with garbage (for tests)."""
        self._payloads[RedisKeys.cart_key(customer_id)] = payload
