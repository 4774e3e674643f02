# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.data.database import Base, engine
from storefront.data.seed import seed
from storefront.utils.logging import get_logger

# all models have to be imported before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)

logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    seed()
    logger.info("Database tables ready")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
