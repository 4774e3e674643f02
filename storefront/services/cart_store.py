# storefront/services/cart_store.py
import json
from collections import defaultdict
from decimal import Decimal
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from storefront.domain.schemas import CartLine
from storefront.services.cart_storage import CartStorage, MemoryStorage
from storefront.utils.settings import CART_NAMESPACE, CART_UPDATE_EVENT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_LINES = TypeAdapter(list[CartLine])


class EventBus:
    """
    Named, payload-less broadcast. Stands in for the browser window: every
    cart sharing one bus notifies every subscriber (badge, cart page, ...).
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callable[[], None]]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[[], None]) -> Callable[[], None]:
        self._subscribers[event].append(callback)

        def unsubscribe():
            if callback in self._subscribers[event]:
                self._subscribers[event].remove(callback)

        return unsubscribe

    def dispatch(self, event: str) -> None:
        for callback in list(self._subscribers[event]):
            callback()


class CartStore:
    """
    Client-resident cart: (product id, name, unit price, quantity) lines kept
    in durable storage under `<namespace>_cart_data`, with the derived item
    count under `<namespace>_cart_count`.

    Every mutation rewrites both keys and dispatches one change event.
    """

    def __init__(
        self,
        storage: CartStorage | None = None,
        namespace: str = CART_NAMESPACE,
        bus: EventBus | None = None,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.data_key = f"{namespace}_cart_data"
        self.count_key = f"{namespace}_cart_count"
        self.bus = bus if bus is not None else EventBus()

    # query
    def load(self) -> list[CartLine]:
        raw = self.storage.get(self.data_key)
        if not raw:
            return []
        try:
            lines = _LINES.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as e:
            # broken blob is an empty cart, never an error for the caller
            logger.warning(f"Malformed cart data under {self.data_key}, treating as empty: {e}")
            return []
        return self._merge_duplicates(lines)

    def total(self) -> Decimal:
        return sum((line.line_total for line in self.load()), Decimal("0"))

    def count(self) -> int:
        return sum(line.quantity for line in self.load())

    def badge_count(self) -> int:
        """What a subscriber reads back after a change event."""
        raw = self.storage.get(self.count_key)
        try:
            return max(int(raw), 0) if raw is not None else 0
        except ValueError:
            return 0

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        return self.bus.subscribe(CART_UPDATE_EVENT, callback)

    # commands
    def save(self, lines: list[CartLine]) -> None:
        lines = [line for line in lines if line.quantity > 0]
        payload = _LINES.dump_python(lines, mode="json", by_alias=True)
        self.storage.set(self.data_key, json.dumps(payload))
        self.storage.set(self.count_key, str(sum(line.quantity for line in lines)))
        self.bus.dispatch(CART_UPDATE_EVENT)

    def add(self, product, delta: int = 1) -> list[CartLine]:
        """product: anything exposing id, name and price (e.g. ProductOut)."""
        lines = self.load()
        product_id = str(product.id)

        for i, line in enumerate(lines):
            if line.product_id == product_id:
                quantity = line.quantity + delta
                if quantity > 0:
                    lines[i] = line.model_copy(update={"quantity": quantity})
                else:
                    del lines[i]
                break
        else:
            lines.append(
                CartLine(
                    product_id=product_id,
                    name=product.name,
                    unit_price=Decimal(str(product.price)),
                    quantity=max(delta, 1),
                )
            )

        logger.info(f"Cart add {product_id} ({delta:+d})")
        self.save(lines)
        return lines

    def set_quantity(self, product_id: str, delta: int) -> list[CartLine]:
        updated = []
        for line in self.load():
            if line.product_id == product_id:
                quantity = max(0, line.quantity + delta)
                if quantity == 0:
                    continue
                line = line.model_copy(update={"quantity": quantity})
            updated.append(line)

        self.save(updated)
        return updated

    def remove(self, product_id: str) -> list[CartLine]:
        updated = [line for line in self.load() if line.product_id != product_id]
        logger.info(f"Cart remove {product_id}")
        self.save(updated)
        return updated

    def clear(self) -> None:
        self.save([])

    @staticmethod
    def _merge_duplicates(lines: list[CartLine]) -> list[CartLine]:
        # one line per product, hand-edited storage can break that
        merged: dict[str, CartLine] = {}
        for line in lines:
            existing = merged.get(line.product_id)
            if existing:
                merged[line.product_id] = existing.model_copy(
                    update={"quantity": existing.quantity + line.quantity}
                )
            else:
                merged[line.product_id] = line
        return list(merged.values())
