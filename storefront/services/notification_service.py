# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Sends notifications about placed orders.
    Uses Celery so the request does not wait for delivery.
    """

    @staticmethod
    def send_order_notification(user_id: str, order_id: str):
        """
        Queues the order-placed notification.
        The order is already committed, so a broker failure is only logged.
        """
        try:
            send_order_notification_task.delay(user_id, order_id)
        except Exception as e:
            logger.warning(f"Could not queue notification for order {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_id: str):
    """
    Celery task, a real deployment would hand this to an email/SMS/push provider.
    For now it only logs.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} has been placed")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
