from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric

from storefront.data.database import Base
from storefront.data.models._ids import new_id


class CustomerModel(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True, unique=True)

    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True, index=True)
    email = Column(String, nullable=True)

    loyalty_points = Column(Integer, nullable=False, default=0)
    total_spent = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
