# storefront/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import storefront
from storefront.api.errors import register_error_handlers
from storefront.api.routers import carts, catalog, health, orders, users
from storefront.data.database import init_db
from storefront.utils.logging import get_logger
from storefront.utils.settings import CORS_ORIGINS

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database")
    init_db()
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version=storefront.__version__,
        lifespan=lifespan if create_tables else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(catalog.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
