"""Cart persistence: snapshot codec and key-value stores."""
import json
import os
from typing import Optional, Protocol, Union

from rocketcart.db import TTL, RedisKeys, get_redis
from rocketcart.logging import get_logger

from .models import CartSnapshot

logger = get_logger(__name__)

CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "@RocketShoes:cart")


class PersistenceStore(Protocol):
    """Byte-string key-value store holding the serialized cart."""

    async def get(self, key: str) -> Optional[Union[bytes, str]]: ...

    async def set(self, key: str, value: bytes) -> None: ...


def encode_snapshot(snapshot: CartSnapshot) -> bytes:
    return json.dumps(snapshot.to_list(), ensure_ascii=False).encode("utf-8")


def decode_snapshot(raw: Optional[Union[bytes, str]]) -> Optional[CartSnapshot]:
    """
    Decode a stored cart.

    Returns None when nothing is stored or the data is malformed;
    callers treat both as an empty cart.
    """
    if not raw:
        return None
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return CartSnapshot.from_list(json.loads(raw))
    except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring corrupted cart data: {e}")
        return None


class MemoryCartStore:
    """In-process store for sessions without Redis."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = value


class RedisCartStore:
    """Upstash Redis store; keys get the cart: prefix."""

    def __init__(self, redis=None, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def get(self, key: str) -> Optional[Union[bytes, str]]:
        return await self.redis.get(RedisKeys.cart_key(key))

    async def set(self, key: str, value: bytes) -> None:
        # Upstash speaks REST/JSON, so values travel as text
        text = value.decode("utf-8")
        if self.ttl > 0:
            await self.redis.set(RedisKeys.cart_key(key), text, ex=self.ttl)
        else:
            await self.redis.set(RedisKeys.cart_key(key), text)


async def load_snapshot(store: PersistenceStore, key: str = CART_STORAGE_KEY) -> CartSnapshot:
    """Read the persisted cart, or an empty one if absent, unreadable or malformed."""
    try:
        raw = await store.get(key)
    except Exception:
        logger.exception("Failed to read cart from store, starting empty")
        return CartSnapshot()
    return decode_snapshot(raw) or CartSnapshot()


async def save_snapshot(store: PersistenceStore, snapshot: CartSnapshot, key: str = CART_STORAGE_KEY) -> bool:
    """Overwrite the persisted cart. Returns False (and logs) if the store fails."""
    try:
        await store.set(key, encode_snapshot(snapshot))
        return True
    except Exception:
        logger.exception("Failed to save cart to store")
        return False
