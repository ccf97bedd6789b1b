# storefront/services/notification_service.py
from storefront.celery_worker import PUBLISH_RETRY_POLICY, celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, total: str):
        send_order_notification_task.apply_async(
            args=(user_id, order_id, total),
            retry=True,
            retry_policy=PUBLISH_RETRY_POLICY,
        )


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, total: str):
    """
    Only logs for now; no mail or push gateway is wired in.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} placed, total {total}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
