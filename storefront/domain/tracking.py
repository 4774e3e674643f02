# storefront/domain/tracking.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class TrackingStatus(str, Enum):
    PROCESSING = "processing"
    PACKED = "packed"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"


TRACKING_STEPS = (
    TrackingStatus.PROCESSING,
    TrackingStatus.PACKED,
    TrackingStatus.OUT_FOR_DELIVERY,
    TrackingStatus.DELIVERED,
)

TRACKING_LABELS = {
    TrackingStatus.PROCESSING: "Processing",
    TrackingStatus.PACKED: "Packed",
    TrackingStatus.OUT_FOR_DELIVERY: "Out for Delivery",
    TrackingStatus.DELIVERED: "Delivered",
}


def tracking_index(tracking_status: str | None) -> int:
    """Position in TRACKING_STEPS; missing means processing, unknown means -1."""
    value = tracking_status or TrackingStatus.PROCESSING.value
    for i, step in enumerate(TRACKING_STEPS):
        if step.value == value:
            return i
    return -1


def tracking_progress(tracking_status: str | None) -> list[dict]:
    current = tracking_index(tracking_status)
    return [
        {
            "step": step,
            "label": TRACKING_LABELS[step],
            "complete": i <= current,
        }
        for i, step in enumerate(TRACKING_STEPS)
    ]


def tracking_after_status_change(status: str, tracking_status: str) -> str:
    # delivered order is always delivered on the tracking bar, not the other way round
    if status == OrderStatus.DELIVERED.value:
        return TrackingStatus.DELIVERED.value
    return tracking_status
