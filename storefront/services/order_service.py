# storefront/services/order_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import OrderOut, OrderTrackingOut
from storefront.domain.tracking import (
    OrderStatus,
    TrackingStatus,
    tracking_index,
    tracking_progress,
    tracking_after_status_change,
)
from storefront.repos.order_repo import OrderRepo
from storefront.services.profile_service import ProfileService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Orders after checkout: the buyer's read-only history and the admin's
    status / tracking edits. total_amount is never touched here.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)
        self.profiles = ProfileService(db)

    # query
    def list_for_user(self, user_id: str) -> list[OrderTrackingOut]:
        return [self._with_tracking(o) for o in self.repo.list_by_user(user_id)]

    def list_orders(self, status: OrderStatus | None = None) -> list[OrderOut]:
        value = status.value if status else None
        return [OrderOut.model_validate(o) for o in self.repo.list_orders(value)]

    def list_for_phone(self, phone: str) -> list[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_by_phone(phone)]

    def get_order(self, order_id: str, user_id: str | None = None) -> OrderTrackingOut:
        order = self._get(order_id)
        if user_id is not None and order.user_id != user_id:
            raise PermissionError("No access to this order")
        return self._with_tracking(order)

    # commands (admin)
    def update_status(self, order_id: str, status: OrderStatus) -> OrderOut:
        order = self._get(order_id)
        previous = order.status

        order.status = status.value
        order.tracking_status = tracking_after_status_change(order.status, order.tracking_status)
        self.repo.save(order)

        logger.info(
            f"Order {order_id} status {previous} -> {order.status} "
            f"(tracking {order.tracking_status})"
        )

        # totals are re-aggregated, so toggling status back and forth is harmless
        try:
            self.profiles.reconcile(order)
        except Exception as e:
            logger.warning(f"Profile reconciliation failed for order {order_id}: {e}")

        return OrderOut.model_validate(order)

    def update_tracking(self, order_id: str, tracking_status: TrackingStatus) -> OrderOut:
        order = self._get(order_id)
        previous = order.tracking_status

        # any step is allowed, moving backwards is how an admin corrects a mistake
        if tracking_index(tracking_status.value) < tracking_index(previous):
            logger.warning(f"Order {order_id} tracking moved back {previous} -> {tracking_status.value}")

        order.tracking_status = tracking_status.value
        self.repo.save(order)

        logger.info(f"Order {order_id} tracking {previous} -> {order.tracking_status}")
        return OrderOut.model_validate(order)

    def delete_order(self, order_id: str) -> None:
        order = self._get(order_id)
        user_id, phone = order.user_id, order.phone
        self.repo.delete_order(order)
        logger.info(f"Order {order_id} deleted with its items")

        try:
            self.profiles.reconcile_identity(user_id, phone)
        except Exception as e:
            logger.warning(f"Profile re-aggregation failed after deleting order {order_id}: {e}")

    def clear_orders(self) -> int:
        deleted = self.repo.delete_all()
        logger.warning(f"Bulk clear removed {deleted} orders")

        # no orders left, so every customer's spend is zero
        try:
            self.profiles.reset_all_totals()
        except Exception as e:
            logger.warning(f"Customer totals reset failed after bulk clear: {e}")

        return deleted

    def _get(self, order_id: str) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    def _with_tracking(order: OrderModel) -> OrderTrackingOut:
        data = OrderOut.model_validate(order).model_dump()
        return OrderTrackingOut(**data, tracking=tracking_progress(order.tracking_status))
