# storefront/repos/product_repo.py
from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.variant import ProductVariantModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductFilters, ProductSort


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    # products

    def get_product(self, product_id: int, fresh: bool = False) -> ProductModel | None:
        return self.db.get(ProductModel, product_id, populate_existing=fresh)

    def get_product_by_sku(self, sku: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.sku == sku)
        ).scalars().first()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def update_product(self, product_id: int, data: dict) -> ProductModel:
        product = self.get_product(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        for field, value in data.items():
            setattr(product, field, value)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.delete_variants_by_product(product.id)
        self.db.delete(product)
        self.db.flush()

    def get_products(
        self,
        filters: ProductFilters,
        sort: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[ProductModel], int]:
        """
        Conjunctive filter over the product table.
        The count is taken before pagination; unknown sort keeps insertion order.
        """
        conditions = []
        if filters.category_id is not None:
            conditions.append(ProductModel.category_id == filters.category_id)
        if filters.search:
            conditions.append(
                or_(
                    ProductModel.name.icontains(filters.search, autoescape=True),
                    ProductModel.description.icontains(filters.search, autoescape=True),
                )
            )
        if filters.min_price is not None:
            conditions.append(ProductModel.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(ProductModel.price <= filters.max_price)
        if filters.featured is not None:
            conditions.append(ProductModel.featured == filters.featured)

        stmt = select(ProductModel).where(*conditions)
        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        if sort == ProductSort.PRICE_ASC.value:
            stmt = stmt.order_by(ProductModel.price.asc(), ProductModel.id.asc())
        elif sort == ProductSort.PRICE_DESC.value:
            stmt = stmt.order_by(ProductModel.price.desc(), ProductModel.id.asc())
        elif sort == ProductSort.NEWEST.value:
            stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        else:
            stmt = stmt.order_by(ProductModel.id.asc())

        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        return list(self.db.execute(stmt).scalars().all()), total

    # variants

    def get_variant(self, variant_id: int, fresh: bool = False) -> ProductVariantModel | None:
        return self.db.get(ProductVariantModel, variant_id, populate_existing=fresh)

    def get_variants_by_product(self, product_id: int) -> list[ProductVariantModel]:
        stmt = (
            select(ProductVariantModel)
            .where(ProductVariantModel.product_id == product_id)
            .order_by(ProductVariantModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def delete_variants_by_product(self, product_id: int) -> None:
        self.db.execute(
            delete(ProductVariantModel).where(ProductVariantModel.product_id == product_id)
        )

    def find_variant(self, product_id: int, name: str, value: str) -> ProductVariantModel | None:
        stmt = select(ProductVariantModel).where(
            ProductVariantModel.product_id == product_id,
            ProductVariantModel.name == name,
            ProductVariantModel.value == value,
        )
        return self.db.execute(stmt).scalars().first()

    def create_variant(self, variant: ProductVariantModel) -> ProductVariantModel:
        self.db.add(variant)
        self.db.flush()
        return variant
