from decimal import Decimal

import fakeredis
import pytest

from storefront.celery_worker import celery_app
from storefront.data.database import Database
from storefront.domain.schemas import CartItemIn, ProductCreate, UserCreate
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.lock_service import LockService
from storefront.services.user_service import UserService

celery_app.conf.task_always_eager = True


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id, total):
        self.sent.append((user_id, order_id, total))


@pytest.fixture
def database():
    database = Database("sqlite+pysqlite:///:memory:")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def lock_service(redis_client):
    return LockService(client=redis_client)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(username=None, email=None, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        return UserService(db).create_user(
            UserCreate(
                username=username or f"user{n}",
                email=email or f"user{n}@example.com",
                password="hashed-secret",
                **kwargs,
            )
        )

    return _make


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(price="10", discount="0", stock=10, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        data = {
            "name": f"Product {n}",
            "sku": f"SKU-{n}",
            "price": Decimal(str(price)),
            "discount": Decimal(str(discount)),
            "stock": stock,
        }
        data.update(kwargs)
        return CatalogService(db).create_product(ProductCreate(**data))

    return _make


@pytest.fixture
def fill_cart(db):
    def _fill(cart_id, product, quantity=1, variant=None):
        return CartService(db).add_item(
            cart_id,
            CartItemIn(
                product_id=product.id,
                variant_id=variant.id if variant else None,
                quantity=quantity,
            ),
        )

    return _fill
