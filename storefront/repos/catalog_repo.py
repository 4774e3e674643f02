# storefront/repos/catalog_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_active_categories(self) -> list[CategoryModel]:
        stmt = (
            select(CategoryModel)
            .where(CategoryModel.is_active.is_(True))
            .order_by(CategoryModel.display_order, CategoryModel.name)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_active_products(self, category_id: str | None = None) -> list[ProductModel]:
        stmt = select(ProductModel).where(ProductModel.is_active.is_(True))
        if category_id:
            stmt = stmt.where(ProductModel.category_id == category_id)
        stmt = stmt.order_by(ProductModel.name)
        return list(self.db.execute(stmt).scalars().all())

    def get_active_product_by_slug(self, slug: str) -> ProductModel | None:
        stmt = select(ProductModel).where(
            ProductModel.slug == slug,
            ProductModel.is_active.is_(True),
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def count_categories(self) -> int:
        return self.db.execute(select(func.count(CategoryModel.id))).scalar_one()

    def count_products(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def add_all(self, rows) -> None:
        self.db.add_all(rows)

    def commit(self) -> None:
        self.db.commit()
