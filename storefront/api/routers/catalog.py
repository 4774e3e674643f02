# storefront/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryOut, ProductOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()


@router.get("/products", response_model=List[ProductOut])
def list_products(
    category_id: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_products(category_id)


@router.get("/products/{slug}", response_model=ProductOut)
def get_product(slug: str, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_product(slug)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
