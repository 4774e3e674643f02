# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.services.whatsapp import WhatsAppClient, build_order_message, whatsapp_url
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order confirmations over WhatsApp.
    Sending goes through Celery, the checkout never waits on it.
    """

    @staticmethod
    def send_order_confirmation(order: dict):
        send_order_confirmation_task.delay(order)


@celery_app.task(name="storefront.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(order: dict):
    """
    POSTs the confirmation when a gateway is configured,
    otherwise only logs the wa.me link the pharmacy can open by hand.
    """
    message = build_order_message(order)
    client = WhatsAppClient()

    if not client.enabled:
        logger.info(f"[NOTIFICATION] Order {order['id']}: {whatsapp_url(message, order['phone'])}")
        return {"order_id": order["id"], "status": "logged"}

    client.send_text(order["phone"], message)
    logger.info(f"[NOTIFICATION] Order {order['id']} confirmation sent to {order['phone']}")
    return {"order_id": order["id"], "status": "sent"}
