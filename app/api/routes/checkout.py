from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_cart_store, get_pricing
from app.api.schemas.checkout import CheckoutRequest, OrderConfirmation
from app.services.cart import CartStore
from app.services.checkout import EmptyCartError, PricingRules, place_order

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=OrderConfirmation)
async def checkout(
    payload: CheckoutRequest,
    store: CartStore = Depends(get_cart_store),
    pricing: PricingRules = Depends(get_pricing),
):
    """
    Place an order for everything in the cart. Shipping and payment details
    are validated but no payment is taken. The cart is emptied on success.
    """
    try:
        return place_order(store, payload.shipping.model_dump(), pricing)
    except EmptyCartError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
