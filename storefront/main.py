# storefront/main.py
from fastapi import FastAPI
import uvicorn

from storefront.api.routers import addresses, cart, categories, health, orders, products, users
from storefront.data.database import Database
from storefront.data.seed import seed
from storefront.services.lock_service import LockService
from storefront.utils.settings import SEED_SAMPLE_DATA
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(
    database: Database | None = None,
    lock_service: LockService | None = None,
    seed_data: bool = SEED_SAMPLE_DATA,
) -> FastAPI:
    database = database or Database()

    logger.info("Initializing database...")
    try:
        database.create_all()
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    if seed_data:
        with database.exclusive_session() as db:
            seed(db)

    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
    )
    app.state.database = database
    app.state.lock_service = lock_service or LockService()

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(addresses.router)

    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
