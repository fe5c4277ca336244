from typing import Union

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_cart_store, get_pricing, get_product_service
from app.api.schemas.cart import (
    AddToCartRequest,
    CartItemOut,
    CartOut,
    OrderSummaryOut,
    UpdateQuantityRequest,
)
from app.models.product import is_int_text
from app.services.cart import CartStore
from app.services.catalog import ProductNotFound, ProductService
from app.services.checkout import PricingRules, summarize_cart

router = APIRouter(prefix="/api/cart", tags=["cart"])

# handlers are async so every cart mutation runs on the event loop thread


def _coerce_product_id(product_id: str) -> Union[int, str]:
    # catalog ids are integers; path segments always arrive as text
    return int(product_id) if is_int_text(product_id) else product_id


def _cart_out(store: CartStore, pricing: PricingRules) -> CartOut:
    return CartOut(
        items=[CartItemOut.from_model(it) for it in store.items],
        count=store.get_cart_count(),
        total=round(store.get_cart_total(), 2),
        is_loading=store.is_loading,
        summary=OrderSummaryOut(**summarize_cart(store, pricing).to_dict()),
    )


@router.get("", response_model=CartOut)
async def get_cart(store: CartStore = Depends(get_cart_store), pricing: PricingRules = Depends(get_pricing)):
    return _cart_out(store, pricing)


@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=CartItemOut)
async def add_item(
    payload: AddToCartRequest,
    store: CartStore = Depends(get_cart_store),
    products: ProductService = Depends(get_product_service),
):
    """
    Add a catalog product to the cart, merging with an existing line item.
    The line item snapshots name, price and first image from the catalog.
    """
    try:
        product = await products.get_by_id(payload.product_id)
    except ProductNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    item = await store.add_to_cart(product, payload.quantity)
    return CartItemOut.from_model(item)


@router.put("/items/{product_id}", response_model=CartOut)
async def update_item(
    product_id: str,
    payload: UpdateQuantityRequest,
    store: CartStore = Depends(get_cart_store),
    pricing: PricingRules = Depends(get_pricing),
):
    store.update_quantity(_coerce_product_id(product_id), payload.quantity)
    return _cart_out(store, pricing)


@router.delete("/items/{product_id}", response_model=CartOut)
async def remove_item(
    product_id: str,
    store: CartStore = Depends(get_cart_store),
    pricing: PricingRules = Depends(get_pricing),
):
    store.remove_from_cart(_coerce_product_id(product_id))
    return _cart_out(store, pricing)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    store.clear_cart()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
