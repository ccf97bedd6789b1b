from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.data.database import Database
from storefront.data.models.user import UserModel
from storefront.main import create_app


@pytest.fixture
def app(lock_service):
    database = Database("sqlite+pysqlite:///:memory:")
    app = create_app(database=database, lock_service=lock_service, seed_data=True)
    yield app
    database.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


def _register(client, username, admin=False, app=None):
    resp = client.post(
        "/users/",
        json={"username": username, "email": f"{username}@example.com", "password": "hash"},
    )
    assert resp.status_code == 201
    user_id = resp.json()["id"]
    if admin:
        with app.state.database.exclusive_session() as db:
            db.get(UserModel, user_id).is_admin = True
            db.commit()
    return {"X-User-Id": str(user_id)}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_seeded_catalog(client):
    assert len(client.get("/categories/").json()) == 3

    body = client.get("/products/", params={"featured": "true"}).json()
    assert body["pagination"]["total"] == 3


def test_product_listing_filters_and_paginates(client):
    body = client.get(
        "/products/",
        params={"minPrice": "100", "maxPrice": "300", "sort": "price_desc", "limit": 1, "page": 2},
    ).json()

    assert body["pagination"] == {"page": 2, "limit": 1, "total": 2, "pages": 2}
    assert [p["sku"] for p in body["products"]] == ["AUDIO-PRO-1"]


def test_admin_only_routes(client, app):
    payload = {"name": "Lamp", "price": "20", "stock": 4, "sku": "LAMP-1"}

    assert client.post("/products/", json=payload).status_code == 401
    assert client.post("/products/", json=payload, headers=_register(client, "eve")).status_code == 403

    admin = _register(client, "root", admin=True, app=app)
    assert client.post("/products/", json=payload, headers=admin).status_code == 201
    assert client.post("/products/", json=payload, headers=admin).status_code == 409


def test_anonymous_cart_follows_the_session(client):
    first = client.get("/cart/").json()
    assert first["cart"]["user_id"] is None

    added = client.post("/cart/items", json={"product_id": 4, "quantity": 2})
    assert added.status_code == 201
    client.post("/cart/items", json={"product_id": 4, "quantity": 1})

    cart = client.get("/cart/").json()
    assert cart["cart"]["id"] == first["cart"]["id"]
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert cart["items"][0]["product"]["sku"] == "SHIRT-PM-1"


def test_cart_item_validation(client):
    assert client.post("/cart/items", json={"product_id": 999}).status_code == 404
    assert client.post("/cart/items", json={"product_id": 1, "quantity": 0}).status_code == 422

    item = client.post("/cart/items", json={"product_id": 1}).json()
    assert client.put(f"/cart/items/{item['id']}", json={"quantity": 0}).status_code == 422
    assert client.put(f"/cart/items/{item['id']}", json={"quantity": 4}).json()["quantity"] == 4
    assert client.delete(f"/cart/items/{item['id']}").status_code == 204
    assert client.delete(f"/cart/items/{item['id']}").status_code == 404


def test_checkout_flow(client):
    # laptop: 899.99 - 150 = 749.99
    client.post("/cart/items", json={"product_id": 1, "quantity": 2})
    user = _register(client, "ana")

    address = client.post(
        "/addresses/",
        json={
            "street": "Calle 1",
            "city": "Lima",
            "state": "Lima",
            "postal_code": "15001",
            "country": "PE",
            "is_default": True,
        },
        headers=user,
    ).json()

    resp = client.post(
        "/orders/",
        json={"address_id": address["id"], "payment_method": "card", "shipping_method": "standard"},
        headers=user,
    )
    assert resp.status_code == 201
    order = resp.json()
    # 1499.98 + 90.00 taxes, free shipping
    assert abs(Decimal(order["total"]) - Decimal("1589.98")) < Decimal("0.01")

    detail = client.get(f"/orders/{order['id']}", headers=user).json()
    assert Decimal(detail["items"][0]["price"]) == Decimal("749.99")
    assert client.get("/products/1").json()["stock"] == 23

    assert client.get("/cart/", headers=user).json()["items"] == []
    assert [o["id"] for o in client.get("/orders/", headers=user).json()] == [order["id"]]

    other = _register(client, "luis")
    assert client.get(f"/orders/{order['id']}", headers=other).status_code == 403


def test_checkout_with_empty_cart(client):
    user = _register(client, "ana")

    resp = client.post("/orders/", json={"total": "10"}, headers=user)

    assert resp.status_code == 400


def test_order_status_update(client, app):
    client.post("/cart/items", json={"product_id": 2})
    user = _register(client, "ana")
    order = client.post("/orders/", json={}, headers=user).json()
    admin = _register(client, "boss", admin=True, app=app)

    assert client.patch(f"/orders/{order['id']}/status", json={"status": "enviado"}, headers=user).status_code == 403
    resp = client.patch(f"/orders/{order['id']}/status", json={"status": "enviado"}, headers=admin)
    assert resp.json()["status"] == "enviado"
    assert client.patch(f"/orders/{order['id']}/status", json={"status": "perdido"}, headers=admin).status_code == 422


def test_addresses_are_owned(client):
    ana, luis = _register(client, "ana"), _register(client, "luis")
    body = {"street": "S", "city": "C", "state": "St", "postal_code": "1", "country": "X"}
    address = client.post("/addresses/", json=body, headers=ana).json()

    assert client.put(f"/addresses/{address['id']}", json={"city": "Z"}, headers=luis).status_code == 403
    assert client.delete(f"/addresses/{address['id']}", headers=luis).status_code == 403
    assert client.put(f"/addresses/{address['id']}", json={"city": "Z"}, headers=ana).json()["city"] == "Z"
    assert client.delete(f"/addresses/{address['id']}", headers=ana).status_code == 204
    assert client.get("/addresses/", headers=ana).json() == []


def test_reviews(client):
    ana = _register(client, "ana")

    assert client.post("/products/1/reviews", json={"rating": 5}).status_code == 401
    assert client.post("/products/1/reviews", json={"rating": 5}, headers=ana).status_code == 201
    assert client.post("/products/1/reviews", json={"rating": 2}, headers=ana).status_code == 409
    assert client.post("/products/99/reviews", json={"rating": 2}, headers=ana).status_code == 404

    reviews = client.get("/products/1/reviews").json()
    assert [(r["username"], r["rating"]) for r in reviews] == [("ana", 5)]


def test_unknown_user_header(client):
    assert client.get("/orders/", headers={"X-User-Id": "999"}).status_code == 401
