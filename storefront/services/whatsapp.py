# storefront/services/whatsapp.py
from decimal import Decimal
from urllib.parse import quote

import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    WHATSAPP_NUMBER,
    WHATSAPP_API_URL,
    WHATSAPP_API_TOKEN,
    HTTP_TIMEOUT_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def whatsapp_url(message: str, number: str = WHATSAPP_NUMBER) -> str:
    """wa.me deep link with the message pre-filled, works on mobile and desktop."""
    return f"https://wa.me/{number}?text={quote(message, safe='')}"


def format_amount(amount) -> str:
    return f"KES {Decimal(str(amount)):,.0f}"


def build_order_message(order: dict) -> str:
    lines = [
        f"Hello {order['full_name']}, your order #{order['id'][:8]} has been received.",
        "",
    ]
    for item in order.get("items", []):
        lines.append(f"- {item['product_name']} x{item['quantity']}: {format_amount(item['total_price'])}")
    lines += [
        "",
        f"Total: {format_amount(order['total_amount'])}",
        f"Delivery to: {order['delivery_address']}",
    ]
    return "\n".join(lines)


class WhatsAppClient:
    def __init__(self, api_url: str | None = None, token: str | None = None, timeout: int = HTTP_TIMEOUT_SECONDS):
        self.api_url = (api_url if api_url is not None else WHATSAPP_API_URL).rstrip("/")
        self.token = token if token is not None else WHATSAPP_API_TOKEN
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.api_url)

    @http_retry()
    def send_text(self, to: str, message: str) -> dict:
        logger.info(f"WhatsAppClient POST {self.api_url} to {to}")
        resp = requests.post(
            self.api_url,
            json={"to": to, "type": "text", "text": {"body": message}},
            headers={"Authorization": f"Bearer {self.token}"} if self.token else {},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
