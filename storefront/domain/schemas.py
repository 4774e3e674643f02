# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime
from enum import Enum

from storefront.domain.loyalty import Tier
from storefront.domain.tracking import OrderStatus, TrackingStatus


class CartLine(BaseModel):
    """One product entry of the buyer's cart; stored with the short keys id/price."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    product_id: str = Field(..., min_length=1, alias="id")
    name: str
    unit_price: Decimal = Field(..., ge=0, alias="price")
    quantity: int = Field(..., ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class PaymentMethod(str, Enum):
    MPESA = "mpesa"
    CARD = "card"


class CheckoutStep(str, Enum):
    CARD_DETAILS = "card_details"
    CONFIRMED = "confirmed"


class BuyerDetails(BaseModel):
    """Schema for buyer-entered checkout fields (checked by the checkout service)."""

    full_name: str = ""
    phone: str = ""
    delivery_address: str = ""
    email: str | None = None
    notes: str | None = None


class CheckoutIn(BaseModel):
    """Schema for a checkout submission: cart snapshot plus buyer form."""

    lines: List[CartLine]
    buyer: BuyerDetails
    payment_method: PaymentMethod = PaymentMethod.MPESA
    card_confirmed: bool = False
    user_id: str | None = None


class OrderItemOut(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: str
    user_id: str | None = None
    full_name: str
    phone: str
    email: str | None = None
    delivery_address: str
    notes: str | None = None
    total_amount: Decimal
    status: OrderStatus
    tracking_status: TrackingStatus
    created_at: datetime
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class TrackingStepOut(BaseModel):
    step: TrackingStatus
    label: str
    complete: bool


class OrderTrackingOut(OrderOut):
    """Order with the buyer-facing 4-step progress bar."""

    tracking: List[TrackingStepOut]


class CheckoutOut(BaseModel):
    step: CheckoutStep
    order: OrderOut | None = None
    delivery_address: str | None = None
    phone: str | None = None


class CustomerOut(BaseModel):
    id: str
    user_id: str | None = None
    full_name: str
    phone: str | None = None
    email: str | None = None
    loyalty_points: int = Field(..., ge=0)
    total_spent: Decimal = Field(..., ge=0)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoyaltyOut(BaseModel):
    points: int
    tier: Tier
    emoji: str
    next_threshold: int | None
    points_to_next: int | None
    progress: float


class ProfileOut(BaseModel):
    customer: CustomerOut | None
    loyalty: LoyaltyOut


class AccountProfileIn(BaseModel):
    """Schema for creating the customer row on account signup."""

    user_id: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None


class AddressIn(BaseModel):
    label: str = Field("Home", min_length=1, max_length=50)
    address: str = Field(..., min_length=1)
    is_default: bool = False


class AddressOut(BaseModel):
    id: str
    user_id: str
    label: str
    address: str
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


class CategoryOut(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: str
    category_id: str | None = None
    name: str
    slug: str
    price: Decimal
    dosage: str | None = None
    description: str | None = None
    ingredients: str | None = None
    warnings: str | None = None
    image_url: str | None = None
    stock: int

    model_config = ConfigDict(from_attributes=True)


class OrderStatusIn(BaseModel):
    status: OrderStatus


class TrackingStatusIn(BaseModel):
    tracking_status: TrackingStatus


class PointsAdjustIn(BaseModel):
    amount: int = Field(..., description="Points to add (negative to deduct)")


class StatsOut(BaseModel):
    categories: int
    products: int
    orders: int
