# storefront/services/lock_service.py
import uuid
from contextlib import contextmanager
from typing import Iterable, Iterator

import redis

from storefront.domain.errors import LockConflictError
from storefront.utils.retry import redis_retry
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS, REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# compare and delete in one step, only the owner token may release
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


def cart_lock_key(cart_id: int) -> str:
    return f"cart:{cart_id}:lock"


def product_lock_key(product_id: int) -> str:
    return f"product:{product_id}:lock"


class LockService:
    """
    Mutual exclusion for checkout:
    - one lock per cart, taken before the cart is read
    - one per product whose stock is decremented, taken once the items are known
    - SET NX EX to acquire, Lua compare-and-delete to release
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, token: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {key}")
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def hold(self, keys: Iterable[str], ttl: int = CHECKOUT_LOCK_TTL_SECONDS) -> Iterator[str]:
        """
        Takes every key in the given order under one token, or none of them.
        Raises LockConflictError on the first busy key; keys already taken are released.
        """
        token = uuid.uuid4().hex
        held: list[str] = []

        try:
            for key in keys:
                if not self.acquire(key, token, ttl):
                    raise LockConflictError(f"{key} is held by another checkout")
                held.append(key)
            yield token
        finally:
            for key in reversed(held):
                self.release(key, token)

    def cart_lock(self, cart_id: int, ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        return self.hold([cart_lock_key(cart_id)], ttl)

    def product_locks(self, product_ids: Iterable[int], ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        # fixed key order so two checkouts cannot deadlock
        return self.hold([product_lock_key(pid) for pid in sorted(set(product_ids))], ttl)
