from decimal import Decimal

import pytest
from sqlalchemy import event

from storefront.data.database import Database
from storefront.domain.errors import NotFoundError, ValidationConflictError
from storefront.domain.schemas import (
    CategoryCreate,
    ProductCreate,
    ProductFilters,
    ProductUpdate,
    ReviewCreate,
    UserCreate,
    VariantCreate,
)
from storefront.services.catalog_service import CatalogService
from storefront.services.review_service import ReviewService
from storefront.services.user_service import UserService


@pytest.fixture
def catalog(db):
    return CatalogService(db)


def test_price_range_filter_counts_before_pagination(catalog, make_product):
    for price in ["10", "50", "99", "150"]:
        make_product(price=price)

    filters = ProductFilters(min_price=Decimal("20"), max_price=Decimal("100"))
    products, total = catalog.list_products(filters, limit=1, offset=0)

    assert total == 2
    assert len(products) == 1

    products, total = catalog.list_products(filters, limit=10, offset=0)
    assert sorted(p.price for p in products) == [Decimal("50"), Decimal("99")]
    assert total == 2


def test_search_is_case_insensitive_on_name_or_description(catalog, make_product):
    make_product(name="Red Mug")
    make_product(name="Chair", description="A comfy RED seat")
    make_product(name="Blue Lamp")

    products, total = catalog.list_products(ProductFilters(search="red"))

    assert total == 2
    assert {p.name for p in products} == {"Red Mug", "Chair"}


def test_search_treats_wildcards_literally(catalog, make_product):
    make_product(name="100% cotton")
    make_product(name="1000 pieces")

    products, total = catalog.list_products(ProductFilters(search="100%"))

    assert [p.name for p in products] == ["100% cotton"]


def test_filters_are_conjunctive(catalog, make_product):
    shoes = catalog.create_category(CategoryCreate(name="Shoes"))
    make_product(price="30", category_id=shoes.id, featured=True)
    make_product(price="30", category_id=shoes.id, featured=False)
    make_product(price="30", featured=True)

    products, total = catalog.list_products(ProductFilters(category_id=shoes.id, featured=True))

    assert total == 1
    assert products[0].category_id == shoes.id and products[0].featured


def test_sorting(catalog, make_product):
    cheap = make_product(price="5")
    pricey = make_product(price="500")
    middle = make_product(price="50")

    by = lambda sort: [p.id for p in catalog.list_products(ProductFilters(), sort=sort)[0]]

    assert by("price_asc") == [cheap.id, middle.id, pricey.id]
    assert by("price_desc") == [pricey.id, middle.id, cheap.id]
    assert by("newest") == [middle.id, pricey.id, cheap.id]
    assert by("alphabetical") == [cheap.id, pricey.id, middle.id]
    assert by(None) == [cheap.id, pricey.id, middle.id]


def test_offset_slices_the_filtered_set(catalog, make_product):
    ids = [make_product().id for _ in range(5)]

    products, total = catalog.list_products(ProductFilters(), limit=2, offset=2)

    assert total == 5
    assert [p.id for p in products] == ids[2:4]


def test_duplicate_sku_is_rejected(catalog, make_product):
    make_product(sku="ABC")

    with pytest.raises(ValidationConflictError):
        catalog.create_product(ProductCreate(name="Other", price=Decimal("1"), stock=1, sku="ABC"))


def test_update_product(catalog, make_product):
    product = make_product(stock=3)
    make_product(sku="TAKEN")

    updated = catalog.update_product(product.id, ProductUpdate(stock=8))
    assert updated.stock == 8

    with pytest.raises(ValidationConflictError):
        catalog.update_product(product.id, ProductUpdate(sku="TAKEN"))
    with pytest.raises(NotFoundError):
        catalog.update_product(999, ProductUpdate(stock=1))


def test_delete_product(catalog, make_product):
    product = make_product()

    catalog.delete_product(product.id)

    assert catalog.get_product(product.id) is None
    with pytest.raises(NotFoundError):
        catalog.delete_product(product.id)


def test_delete_product_takes_variants_and_reviews_along():
    database = Database("sqlite+pysqlite:///:memory:")

    @event.listens_for(database.engine, "connect")
    def enforce_foreign_keys(dbapi_connection, _):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    database.create_all()
    with database.session() as db:
        catalog = CatalogService(db)
        user = UserService(db).create_user(
            UserCreate(username="ana", email="ana@example.com", password="x")
        )
        product = catalog.create_product(
            ProductCreate(name="Desk", sku="DESK-1", price=Decimal("90"), stock=2)
        )
        catalog.create_variant(product.id, VariantCreate(name="Wood", value="Oak"))
        ReviewService(db).create_review(user.id, product.id, ReviewCreate(rating=4))

        catalog.delete_product(product.id)

        assert catalog.get_product(product.id) is None
        assert catalog.list_variants(product.id) == []
        assert ReviewService(db).list_reviews(product.id) == []
    database.dispose()


def test_duplicate_variant_is_rejected_per_product(catalog, make_product):
    shirt, hat = make_product(), make_product()
    catalog.create_variant(shirt.id, VariantCreate(name="Color", value="Red"))

    with pytest.raises(ValidationConflictError):
        catalog.create_variant(shirt.id, VariantCreate(name="Color", value="Red"))

    catalog.create_variant(shirt.id, VariantCreate(name="Color", value="Blue"))
    catalog.create_variant(hat.id, VariantCreate(name="Color", value="Red"))

    assert [v.value for v in catalog.list_variants(shirt.id)] == ["Red", "Blue"]


def test_category_parent_is_not_validated(catalog):
    child = catalog.create_category(CategoryCreate(name="Child", parent_id=77))

    assert catalog.get_category(child.id).parent_id == 77
    assert [c.name for c in catalog.list_categories()] == ["Child"]
