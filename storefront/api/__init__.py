# storefront/api/__init__.py
from fastapi import FastAPI
from storefront.api.routers import health, catalog, checkout, account, admin


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(catalog.router)
    app.include_router(checkout.router)
    app.include_router(account.router)
    app.include_router(admin.router)

    return app
