import pytest

from storefront.domain.errors import LockConflictError
from storefront.services.lock_service import cart_lock_key, product_lock_key


def test_acquire_is_exclusive(lock_service):
    assert lock_service.acquire("product:1:lock", "a", ttl=30) is True
    assert lock_service.acquire("product:1:lock", "b", ttl=30) is False


def test_only_owner_can_release(lock_service, redis_client):
    lock_service.acquire("cart:1:lock", "owner", ttl=30)

    assert lock_service.release("cart:1:lock", "intruder") is False
    assert redis_client.get("cart:1:lock") == "owner"
    assert lock_service.release("cart:1:lock", "owner") is True
    assert redis_client.get("cart:1:lock") is None


def test_lock_has_ttl(lock_service, redis_client):
    lock_service.acquire("cart:9:lock", "t", ttl=30)

    assert 0 < redis_client.ttl("cart:9:lock") <= 30


def test_cart_and_product_locks_nest(lock_service, redis_client):
    with lock_service.cart_lock(7) as cart_token:
        assert redis_client.get(cart_lock_key(7)) == cart_token

        with lock_service.product_locks([3, 1, 3]) as token:
            assert redis_client.get(product_lock_key(1)) == token
            assert redis_client.get(product_lock_key(3)) == token

        assert redis_client.get(product_lock_key(1)) is None
        assert redis_client.get(cart_lock_key(7)) == cart_token

    assert redis_client.keys("*") == []


def test_product_locks_taken_in_sorted_order(lock_service, monkeypatch):
    taken = []
    acquire = lock_service.acquire

    def recording_acquire(key, token, ttl):
        taken.append(key)
        return acquire(key, token, ttl)

    monkeypatch.setattr(lock_service, "acquire", recording_acquire)

    with lock_service.product_locks([9, 2, 5]):
        pass

    assert taken == [product_lock_key(2), product_lock_key(5), product_lock_key(9)]


def test_product_locks_conflict(lock_service, redis_client):
    redis_client.set(product_lock_key(2), "busy")

    with pytest.raises(LockConflictError):
        with lock_service.product_locks([1, 2, 3]):
            pass

    assert redis_client.get(product_lock_key(1)) is None
    assert redis_client.get(product_lock_key(2)) == "busy"
    assert redis_client.get(product_lock_key(3)) is None
