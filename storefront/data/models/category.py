from sqlalchemy import Column, Integer, String, Boolean, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=True)

    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    products = relationship("ProductModel", back_populates="category")
