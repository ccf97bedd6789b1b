# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CELERY_BROKER_CONNECTION_TIMEOUT,
    CELERY_BROKER_URL,
    CELERY_PUBLISH_MAX_RETRIES,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
)

# publishing happens inside request handlers; an unreachable broker must fail fast
PUBLISH_RETRY_POLICY = {
    "max_retries": CELERY_PUBLISH_MAX_RETRIES,
    "interval_start": 0,
    "interval_step": 0.2,
    "interval_max": 0.5,
}

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly to get registered
celery_app.conf.imports = (
    "storefront.services.notification_service",
)

celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
celery_app.conf.timezone = "UTC"
celery_app.conf.broker_connection_timeout = CELERY_BROKER_CONNECTION_TIMEOUT
celery_app.conf.task_publish_retry_policy = PUBLISH_RETRY_POLICY
