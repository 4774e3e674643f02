# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STARTER_CATALOG = [
    {
        "name": "Vitamins & Wellness",
        "slug": "vitamins-wellness",
        "icon": "leaf",
        "description": "Daily essentials to boost your immune system and energy levels.",
        "products": [
            {
                "name": "Vitamin C High Potency",
                "slug": "vitamin-c-high-potency",
                "dosage": "1000mg · 60 Capsules",
                "price": Decimal("1200"),
                "stock": 15,
            },
            {
                "name": "Vitamin D3 Sunshine",
                "slug": "vitamin-d3-sunshine",
                "dosage": "1000 IU · 90 Softgels",
                "price": Decimal("850"),
                "stock": 4,
            },
            {
                "name": "Daily Multivitamin",
                "slug": "daily-multivitamin",
                "dosage": "60 Tablets · Complete Formula",
                "price": Decimal("2100"),
                "stock": 10,
            },
        ],
    },
]


def seed_catalog(db) -> bool:
    """Loads the starter catalog; does nothing once any category exists."""
    repo = CatalogRepo(db)
    if repo.count_categories():
        return False

    for order, entry in enumerate(STARTER_CATALOG):
        category = CategoryModel(
            name=entry["name"],
            slug=entry["slug"],
            icon=entry["icon"],
            description=entry["description"],
            display_order=order,
        )
        category.products = [ProductModel(**p) for p in entry["products"]]
        repo.add_all([category])

    repo.commit()
    logger.info(f"Seeded {len(STARTER_CATALOG)} categories")
    return True


def seed():
    db = SessionLocal()
    try:
        seed_catalog(db)
    finally:
        db.close()
