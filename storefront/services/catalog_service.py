# storefront/services/catalog_service.py
from sqlalchemy.orm import Session

from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CategoryOut, ProductOut
from storefront.repos.catalog_repo import CatalogRepo


class CatalogService:
    """Read-only view of active categories and products."""

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def list_categories(self) -> list[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self.repo.list_active_categories()]

    def list_products(self, category_id: str | None = None) -> list[ProductOut]:
        return [ProductOut.model_validate(p) for p in self.repo.list_active_products(category_id)]

    def get_product(self, slug: str) -> ProductOut:
        product = self.repo.get_active_product_by_slug(slug)
        if not product:
            raise NotFoundError("Product not found")
        return ProductOut.model_validate(product)
