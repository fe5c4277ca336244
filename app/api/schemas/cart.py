from typing import List, Optional, Union
from pydantic import BaseModel, Field

from app.models.cart import CartLineItem


class CartItemOut(BaseModel):
    product_id: Union[int, str]
    name: str
    price: float
    image: Optional[str] = None
    quantity: int
    line_total: float

    @classmethod
    def from_model(cls, item: CartLineItem) -> "CartItemOut":
        return cls(
            product_id=item.product_id,
            name=item.name,
            price=item.price,
            image=item.image,
            quantity=item.quantity,
            line_total=round(item.line_total(), 2),
        )


class OrderSummaryOut(BaseModel):
    item_count: int
    subtotal: float
    shipping: float
    tax: float
    total: float
    free_shipping_remaining: float


class CartOut(BaseModel):
    items: List[CartItemOut] = []
    count: int = 0
    total: float = 0.0
    is_loading: bool = False
    summary: OrderSummaryOut


class AddToCartRequest(BaseModel):
    product_id: Union[int, str]
    quantity: int = Field(1, ge=1)


class UpdateQuantityRequest(BaseModel):
    # zero or negative removes the line item
    quantity: int
