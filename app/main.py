# app/main.py
from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager
from typing import Optional

from app.config import Settings, get_settings
from app.database import CartStorage, FileBackedKV
from app.services.cart import CartStore
from app.services.catalog import Catalog
from app.services.notifications import NotificationCenter
from app.api.routes import products as product_routes
from app.api.routes import categories as category_routes
from app.api.routes import cart as cart_routes
from app.api.routes import checkout as checkout_routes
from app.api.routes import notifications as notification_routes
from app.middleware.cors_config import configure_cors
from app.middleware.security_headers import add_security_headers


logger = logging.getLogger("uvicorn.error")


def create_app(settings: Optional[Settings] = None, kv=None) -> FastAPI:
    """
    Build the storefront API. `kv` replaces the file-backed cart slot
    (tests pass an InMemoryKV).
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- startup logic ---
        catalog = Catalog.load(
            settings.products_path,
            settings.categories_path,
            simulate_latency=settings.SIMULATE_LATENCY,
        )
        store_kv = kv if kv is not None else FileBackedKV(settings.DATA_DIR)
        notifications = NotificationCenter(history=settings.NOTIFICATION_HISTORY)
        cart_store = CartStore(
            CartStorage(store_kv, settings.CART_STORAGE_KEY),
            notifier=notifications,
            add_delay=settings.CART_ADD_DELAY_MS / 1000.0,
        )
        logger.info(
            "Cart restored from %r: %d line items", settings.CART_STORAGE_KEY, len(cart_store.items)
        )

        app.state.settings = settings
        app.state.catalog = catalog
        app.state.notifications = notifications
        app.state.cart_store = cart_store
        yield
        # --- shutdown logic ---
        logger.info("Shutting down ShopFlow API")

    app = FastAPI(title="ShopFlow API", version="0.1.0", lifespan=lifespan)
    configure_cors(app, settings.CORS_ORIGINS)
    add_security_headers(app)

    app.include_router(product_routes.router)
    app.include_router(category_routes.router)
    app.include_router(cart_routes.router)
    app.include_router(checkout_routes.router)
    app.include_router(notification_routes.router)

    @app.get("/", tags=["root"])
    async def root():
        return {"status": "ok", "service": "ShopFlow API"}

    return app


app = create_app()
