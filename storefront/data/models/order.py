from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True, index=True)

    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True)
    delivery_address = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)

    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending, confirmed, delivered, cancelled
    tracking_status = Column(String, nullable=False, default="processing")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
    )
