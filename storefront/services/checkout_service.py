# storefront/services/checkout_service.py
import uuid
from decimal import Decimal

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import (
    CheckoutValidationError,
    OrderPlacementError,
    CheckoutInProgressError,
)
from storefront.domain.schemas import (
    BuyerDetails,
    CheckoutOut,
    CheckoutStep,
    OrderOut,
    PaymentMethod,
)
from storefront.domain.tracking import OrderStatus, TrackingStatus
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_store import CartStore
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.profile_service import ProfileService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_FAILED_MESSAGE = "Order failed, please retry"


def validate_buyer(buyer: BuyerDetails) -> None:
    """Fail fast on the first missing field: name, phone, delivery address."""
    if not buyer.full_name.strip():
        raise CheckoutValidationError("Full name is required")
    if not buyer.phone.strip():
        raise CheckoutValidationError("Phone number is required")
    if not buyer.delivery_address.strip():
        raise CheckoutValidationError("Delivery address is required")


class CheckoutService:
    """
    Turns the current cart into an order.

    submit() validates the buyer form; cash-equivalent payment places the
    order at once, card payment first asks for card details and waits for
    confirm_payment(). Nothing is written to the store before that point, so
    abandoning checkout leaves no trace.

    Order placement: total from the cart snapshot -> order + items in one
    transaction -> profile reconciliation (best-effort) -> cart cleared ->
    WhatsApp confirmation (best-effort).
    """

    def __init__(
        self,
        db: Session,
        cart: CartStore,
        lock_service: LockService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.orders = OrderRepo(db)
        self.profiles = ProfileService(db)
        self.cart = cart
        self.lock_service = lock_service
        self.notification_service = notification_service
        self._pending: tuple[BuyerDetails, str | None] | None = None

    def submit(
        self,
        buyer: BuyerDetails,
        payment_method: PaymentMethod = PaymentMethod.MPESA,
        user_id: str | None = None,
    ) -> CheckoutOut:
        validate_buyer(buyer)
        if not self.cart.load():
            raise CheckoutValidationError("Your bag is empty")

        if payment_method == PaymentMethod.CARD:
            self._pending = (buyer, user_id)
            logger.info(f"Checkout for {buyer.phone} waiting for card details")
            return CheckoutOut(step=CheckoutStep.CARD_DETAILS)

        return self._place_order(buyer, user_id)

    def confirm_payment(self) -> CheckoutOut:
        """Second step of a card checkout; the buyer form was validated by submit()."""
        if self._pending is None:
            raise CheckoutValidationError("No card payment is awaiting confirmation")
        buyer, user_id = self._pending
        result = self._place_order(buyer, user_id)
        self._pending = None
        return result

    def cancel(self) -> None:
        self._pending = None

    def _place_order(self, buyer: BuyerDetails, user_id: str | None) -> CheckoutOut:
        buyer_key = user_id or buyer.phone.strip()
        token = str(uuid.uuid4())

        self._acquire(buyer_key, token)
        try:
            order = self._create_order(buyer, user_id)
        finally:
            self._release(buyer_key, token)

        # the order exists from here on, nothing below may fail the checkout
        try:
            self.profiles.reconcile(order)
        except Exception as e:
            logger.warning(f"Profile reconciliation failed for order {order.id}: {e}")

        self.cart.clear()

        order_out = OrderOut.model_validate(order)
        self._notify(order_out)

        return CheckoutOut(
            step=CheckoutStep.CONFIRMED,
            order=order_out,
            delivery_address=order.delivery_address,
            phone=order.phone,
        )

    def _create_order(self, buyer: BuyerDetails, user_id: str | None) -> OrderModel:
        lines = self.cart.load()
        if not lines:
            raise CheckoutValidationError("Your bag is empty")

        # total is always recomputed here, never taken from the client
        total = sum((line.line_total for line in lines), Decimal("0"))

        order = OrderModel(
            id=str(uuid.uuid4()),
            user_id=user_id,
            full_name=buyer.full_name.strip(),
            phone=buyer.phone.strip(),
            email=(buyer.email or "").strip() or None,
            delivery_address=buyer.delivery_address.strip(),
            notes=buyer.notes,
            total_amount=total,
            status=OrderStatus.PENDING.value,
            tracking_status=TrackingStatus.PROCESSING.value,
        )
        items = [
            OrderItemModel(
                product_id=line.product_id,
                product_name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.line_total,
            )
            for line in lines
        ]

        try:
            created = self.orders.create_with_items(order, items)
        except SQLAlchemyError as e:
            logger.error(f"Order insert failed for {buyer.phone}: {e}")
            raise OrderPlacementError(ORDER_FAILED_MESSAGE) from e

        logger.info(f"Order {created.id} created: {len(items)} items, total {total}")
        return created

    def _acquire(self, buyer_key: str, token: str) -> None:
        if not self.lock_service:
            return
        try:
            acquired = self.lock_service.acquire_checkout_lock(buyer_key, token)
        except RedisError as e:
            logger.error(f"Checkout lock unavailable for {buyer_key}: {e}")
            raise OrderPlacementError(ORDER_FAILED_MESSAGE) from e
        if not acquired:
            raise CheckoutInProgressError("Checkout already in progress")

    def _release(self, buyer_key: str, token: str) -> None:
        if not self.lock_service:
            return
        try:
            self.lock_service.release_checkout_lock(buyer_key, token)
        except RedisError as e:
            # ttl cleans it up
            logger.warning(f"Checkout lock for {buyer_key} not released: {e}")

    def _notify(self, order: OrderOut) -> None:
        if not self.notification_service:
            return
        try:
            self.notification_service.send_order_confirmation(order.model_dump(mode="json"))
        except Exception as e:
            logger.warning(f"Order confirmation not queued for {order.id}: {e}")
