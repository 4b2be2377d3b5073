# app/services/notification_service.py
from kombu.exceptions import OperationalError

from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Queues customer notifications on Celery.
    """

    @staticmethod
    def send_order_confirmation(user_id: int, order_id: int) -> bool:
        """
        Queues the order confirmation. Runs after the order is committed, so a
        broker outage is logged rather than surfaced to the buyer.
        """
        try:
            send_order_confirmation_task.delay(user_id, order_id)
        except OperationalError:
            logger.exception(f"Could not queue confirmation for order {order_id}")
            return False
        return True


@celery_app.task(name="app.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(user_id: int, order_id: int):
    """
    Celery task; a real deployment would hand this to an email/SMS provider.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} received and pending")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
