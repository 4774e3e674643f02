from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Boolean, Text, Numeric, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True, index=True)

    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    price = Column(Numeric(10, 2), nullable=False)
    dosage = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    ingredients = Column(Text, nullable=True)
    warnings = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    stock = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", back_populates="products")
