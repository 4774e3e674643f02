from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, Text, DateTime

from storefront.data.database import Base
from storefront.data.models._ids import new_id


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)

    label = Column(String, nullable=False, default="Home")
    address = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
