# storefront/tasks/orphans.py
from datetime import datetime, timezone, timedelta

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.domain.tracking import OrderStatus
from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import ORPHAN_ORDER_GRACE_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def sweep_orphan_orders(db, grace_seconds: int = ORPHAN_ORDER_GRACE_SECONDS) -> list[str]:
    """
    Cancels orders older than the grace period that have no items.
    Checkout writes order and items together, so these only come from
    older data or writes made outside the service.
    """
    repo = OrderRepo(db)
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=grace_seconds)

    orphans = repo.find_orphans(cutoff)
    logger.info(f"Found {len(orphans)} orphan orders")

    for order in orphans:
        logger.warning(f"Cancelling orphan order {order.id} ({order.phone}, {order.total_amount})")
        order.status = OrderStatus.CANCELLED.value

    repo.commit()
    return [o.id for o in orphans]


@celery_app.task(name="storefront.tasks.orphans.sweep_orphan_orders_task")
def sweep_orphan_orders_task():
    logger.info("Orphan order sweep started")

    db = SessionLocal()
    try:
        return sweep_orphan_orders(db)
    finally:
        db.close()
