# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_TASK_ALWAYS_EAGER", "false").lower() == "true"
CELERY_BROKER_CONNECTION_TIMEOUT = float(os.getenv("CELERY_BROKER_CONNECTION_TIMEOUT", 2))
CELERY_PUBLISH_MAX_RETRIES = int(os.getenv("CELERY_PUBLISH_MAX_RETRIES", 1))

CHECKOUT_LOCK_TTL_SECONDS = int(os.getenv("CHECKOUT_LOCK_TTL_SECONDS", 30))
STORE_LOCK_TIMEOUT_SECONDS = float(os.getenv("STORE_LOCK_TIMEOUT_SECONDS", 10))

# pricing
TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.06"))
FREE_SHIPPING_THRESHOLD = Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "100"))
FLAT_SHIPPING_COST = Decimal(os.getenv("FLAT_SHIPPING_COST", "9.99"))

SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "storefront_sid")
