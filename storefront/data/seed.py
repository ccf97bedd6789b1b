# storefront/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.domain.schemas import CategoryCreate, ProductCreate
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed(db: Session) -> None:
    catalog = CatalogService(db)

    # only seed an empty catalog
    if catalog.list_categories():
        return

    electronics = catalog.create_category(CategoryCreate(
        name="Electrónica",
        description="Productos electrónicos y tecnológicos",
        image="https://images.unsplash.com/photo-1550009158-9ebf69173e03?ixlib=rb-4.0.3",
    ))
    furniture = catalog.create_category(CategoryCreate(
        name="Muebles",
        description="Mobiliario para el hogar y oficina",
        image="https://images.unsplash.com/photo-1555041469-a586c61ea9bc?ixlib=rb-4.0.3",
    ))
    clothing = catalog.create_category(CategoryCreate(
        name="Ropa",
        description="Prendas de vestir y accesorios",
        image="https://images.unsplash.com/photo-1523381210434-271e8be1f52b?ixlib=rb-4.0.3",
    ))

    products = [
        ProductCreate(
            name="Laptop Ultradelgada Premium 2023",
            description="Potente laptop con procesador de última generación y pantalla de alta resolución",
            price=Decimal("899.99"),
            discount=Decimal("150"),
            stock=25,
            sku="LAPTOP-2023",
            category_id=electronics.id,
            image="https://images.unsplash.com/photo-1546868871-7041f2a55e12?ixlib=rb-4.0.3",
            featured=True,
        ),
        ProductCreate(
            name="Audífonos Inalámbricos Pro",
            description="Auriculares con cancelación de ruido y gran calidad de sonido",
            price=Decimal("149.99"),
            stock=50,
            sku="AUDIO-PRO-1",
            category_id=electronics.id,
            image="https://images.unsplash.com/photo-1585104365269-ab7e0e5dba9d?ixlib=rb-4.0.3",
            featured=True,
        ),
        ProductCreate(
            name="Silla Ergonómica Premium",
            description="Silla de oficina con soporte lumbar y ajustes personalizables",
            price=Decimal("249.99"),
            discount=Decimal("50"),
            stock=15,
            sku="CHAIR-ERGO-1",
            category_id=furniture.id,
            image="https://images.unsplash.com/photo-1503602642458-232111445657?ixlib=rb-4.0.3",
            featured=True,
        ),
        ProductCreate(
            name="Camiseta de Algodón Premium",
            description="Camiseta de algodón pima de alta calidad y diseño exclusivo",
            price=Decimal("29.99"),
            stock=100,
            sku="SHIRT-PM-1",
            category_id=clothing.id,
            image="https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?ixlib=rb-4.0.3",
            featured=False,
        ),
    ]
    for p in products:
        catalog.create_product(p)

    logger.info(f"Seeded 3 categories and {len(products)} products")
