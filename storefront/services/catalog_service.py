# storefront/services/catalog_service.py
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.variant import ProductVariantModel
from storefront.domain.errors import NotFoundError, ValidationConflictError
from storefront.domain.schemas import (
    CategoryCreate,
    ProductCreate,
    ProductFilters,
    ProductUpdate,
    VariantCreate,
)
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.review_repo import ReviewRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """
    Categories, products and their variants, plus the product listing query.
    """

    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepo(db)
        self.products = ProductRepo(db)
        self.reviews = ReviewRepo(db)

    # categories

    def create_category(self, payload: CategoryCreate) -> CategoryModel:
        category = self.categories.create_category(CategoryModel(**payload.model_dump()))
        self.db.commit()
        logger.info(f"Created category {category.id} ({category.name})")
        return category

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.categories.get_category(category_id)

    def list_categories(self) -> list[CategoryModel]:
        return self.categories.get_all_categories()

    # products

    def create_product(self, payload: ProductCreate) -> ProductModel:
        if self.products.get_product_by_sku(payload.sku):
            raise ValidationConflictError(f"SKU {payload.sku} already exists")

        product = self.products.create_product(ProductModel(**payload.model_dump()))
        self.db.commit()
        logger.info(f"Created product {product.id} sku={product.sku}")
        return product

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.products.get_product(product_id)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        patch = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "sku" in patch:
            owner = self.products.get_product_by_sku(patch["sku"])
            if owner and owner.id != product_id:
                raise ValidationConflictError(f"SKU {patch['sku']} already exists")

        product = self.products.update_product(product_id, patch)
        self.db.commit()
        return product

    def delete_product(self, product_id: int) -> None:
        """
        Variants and reviews go with the product. Cart and order items
        that point at it are left as they are.
        """
        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        self.reviews.delete_product_reviews(product_id)
        self.products.delete_product(product)
        self.db.commit()
        logger.info(f"Deleted product {product_id}")

    def list_products(
        self,
        filters: ProductFilters,
        sort: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[ProductModel], int]:
        return self.products.get_products(filters, sort=sort, limit=limit, offset=offset)

    # variants

    def create_variant(self, product_id: int, payload: VariantCreate) -> ProductVariantModel:
        if self.products.find_variant(product_id, payload.name, payload.value):
            raise ValidationConflictError(
                f"Variant {payload.name}={payload.value} already exists for product {product_id}"
            )

        variant = self.products.create_variant(
            ProductVariantModel(product_id=product_id, **payload.model_dump())
        )
        self.db.commit()
        return variant

    def get_variant(self, variant_id: int) -> ProductVariantModel | None:
        return self.products.get_variant(variant_id)

    def list_variants(self, product_id: int) -> list[ProductVariantModel]:
        return self.products.get_variants_by_product(product_id)
