"""Pytest fixtures for storefront tests."""

import os

# settings are read at import time, point them away from postgres/whatsapp first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["WHATSAPP_API_URL"] = ""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api import create_app
from storefront.api.deps import get_lock_service, get_notification_service
from storefront.data.database import Base, get_db
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_storage import MemoryStorage
from storefront.services.cart_store import CartStore


class FakeLockService:
    """In-memory stand-in for the Redis checkout lock."""

    def __init__(self):
        self.held = {}
        self.acquired = []

    def acquire_checkout_lock(self, buyer_key, token, ttl=30):
        if buyer_key in self.held:
            return False
        self.held[buyer_key] = token
        self.acquired.append(buyer_key)
        return True

    def release_checkout_lock(self, buyer_key, token):
        if self.held.get(buyer_key) == token:
            del self.held[buyer_key]
            return True
        return False


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_order_confirmation(self, order):
        self.sent.append(order)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def lock():
    return FakeLockService()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cart(storage):
    return CartStore(storage)


@pytest.fixture
def vitamin_c():
    return SimpleNamespace(id="vit-c-1", name="Vitamin C High Potency", price=1200)


@pytest.fixture
def vitamin_d():
    return SimpleNamespace(id="vit-d-1", name="Vitamin D3 Sunshine", price=850)


@pytest.fixture
def make_order(db):
    """Writes an order straight to the store, one item carrying the whole amount."""

    def _make(phone="0700111222", total="1000", user_id=None, full_name="Jane Wanjiru",
              address="Westlands, Nairobi", email=None, with_items=True, **fields):
        total = Decimal(total)
        order = OrderModel(
            user_id=user_id,
            full_name=full_name,
            phone=phone,
            email=email,
            delivery_address=address,
            total_amount=total,
            status=fields.pop("status", "pending"),
            tracking_status=fields.pop("tracking_status", "processing"),
            **fields,
        )
        items = []
        if with_items:
            items.append(
                OrderItemModel(
                    product_id="vit-c-1",
                    product_name="Vitamin C High Potency",
                    quantity=1,
                    unit_price=total,
                    total_price=total,
                )
            )
        return OrderRepo(db).create_with_items(order, items)

    return _make


@pytest.fixture
def client(session_factory, lock, notifier):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock
    app.dependency_overrides[get_notification_service] = lambda: notifier

    with TestClient(app) as c:
        yield c
