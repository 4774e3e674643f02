"""Tests for WhatsApp order confirmations."""

import pytest

from storefront.services import whatsapp
from storefront.services.notification_service import send_order_confirmation_task
from storefront.services.whatsapp import WhatsAppClient, build_order_message, whatsapp_url


@pytest.fixture
def order():
    return {
        "id": "3f2a9c1e-0000-4000-8000-000000000000",
        "full_name": "Jane Wanjiru",
        "phone": "254700111222",
        "delivery_address": "Pangani, Nairobi",
        "total_amount": "3250.00",
        "items": [
            {"product_name": "Vitamin C High Potency", "quantity": 2, "total_price": "2400.00"},
            {"product_name": "Vitamin D3 Sunshine", "quantity": 1, "total_price": "850.00"},
        ],
    }


def test_whatsapp_url_encodes_message():
    url = whatsapp_url("Hello & welcome", number="254790540867")

    assert url == "https://wa.me/254790540867?text=Hello%20%26%20welcome"


def test_order_message(order):
    message = build_order_message(order)

    assert "#3f2a9c1e" in message
    assert "Vitamin C High Potency x2: KES 2,400" in message
    assert "Total: KES 3,250" in message
    assert "Delivery to: Pangani, Nairobi" in message


def test_task_logs_link_without_gateway(order):
    assert send_order_confirmation_task(order) == {"order_id": order["id"], "status": "logged"}


def test_client_posts_message(monkeypatch):
    calls = []

    class Response:
        def raise_for_status(self):
            pass

        def json(self):
            return {"messages": [{"id": "wamid.1"}]}

    def fake_post(url, json, headers, timeout):
        calls.append((url, json, headers))
        return Response()

    monkeypatch.setattr(whatsapp.requests, "post", fake_post)

    client = WhatsAppClient(api_url="https://gateway.example/messages", token="secret")
    assert client.enabled
    client.send_text("254700111222", "hi")

    [(url, body, headers)] = calls
    assert url == "https://gateway.example/messages"
    assert body["text"]["body"] == "hi"
    assert headers["Authorization"] == "Bearer secret"


def test_client_disabled_without_url():
    assert not WhatsAppClient(api_url="").enabled
