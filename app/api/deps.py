# app/api/deps.py
from fastapi import Request

from app.services.cart import CartStore
from app.services.catalog import CategoryService, ProductService
from app.services.checkout import PricingRules
from app.services.notifications import NotificationCenter

# Collaborators are built in the app lifespan and kept on app.state, so each
# app (and each test) gets its own cart rather than a module-level one.


def get_product_service(request: Request) -> ProductService:
    return request.app.state.catalog.products


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.catalog.categories


def get_cart_store(request: Request) -> CartStore:
    """
    Dependency that returns the cart store.
    Usage:
        store: CartStore = Depends(get_cart_store)
    """
    return request.app.state.cart_store


def get_notifications(request: Request) -> NotificationCenter:
    return request.app.state.notifications


def get_pricing(request: Request) -> PricingRules:
    return PricingRules.from_settings(request.app.state.settings)
