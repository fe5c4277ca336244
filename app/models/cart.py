# app/models/cart.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Dict, Any, Optional, Union

ProductId = Union[int, str]


class MalformedCartData(ValueError):
    """Stored cart payload could not be turned back into line items."""


@dataclass
class CartLineItem:
    """
    One row of the cart. name/price/image are a snapshot of the product taken
    when it was first added; they are not refreshed if the catalog changes.
    """
    product_id: ProductId
    name: str = ""
    price: float = 0.0
    image: Optional[str] = None
    quantity: int = 1

    @classmethod
    def from_product(cls, product: Any, quantity: int = 1) -> "CartLineItem":
        images = list(getattr(product, "images", None) or [])
        return cls(
            product_id=product.id,
            name=product.name,
            price=float(product.price),
            image=images[0] if images else None,
            quantity=int(quantity),
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CartLineItem":
        if not isinstance(d, dict):
            raise MalformedCartData(f"Line item must be an object, got {type(d).__name__}")
        product_id = d.get("productId", d.get("product_id"))
        if product_id is None or isinstance(product_id, bool) or not isinstance(product_id, (int, str)):
            raise MalformedCartData("Line item is missing a usable productId")
        try:
            price = float(d.get("price", 0.0))
            quantity = int(d.get("quantity", 1))
        except (TypeError, ValueError) as e:
            raise MalformedCartData(f"Line item {product_id!r} has bad price/quantity: {e}")
        if price < 0 or quantity < 1:
            raise MalformedCartData(f"Line item {product_id!r} has out of range price/quantity")
        image = d.get("image")
        return cls(
            product_id=product_id,
            name=str(d.get("name") or ""),
            price=price,
            image=str(image) if image is not None else None,
            quantity=quantity,
        )

    def to_dict(self) -> Dict[str, Any]:
        # durable layout keys
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": float(self.price),
            "image": self.image,
            "quantity": int(self.quantity),
        }

    def line_total(self) -> float:
        return float(self.price) * int(self.quantity)

    def copy(self) -> "CartLineItem":
        return replace(self)


@dataclass
class Cart:
    """Ordered line items, unique by product_id."""
    items: List[CartLineItem] = field(default_factory=list)

    @classmethod
    def from_list(cls, raw: Any) -> "Cart":
        if not isinstance(raw, list):
            raise MalformedCartData(f"Cart payload must be a list, got {type(raw).__name__}")
        items: List[CartLineItem] = []
        seen = set()
        for entry in raw:
            item = CartLineItem.from_dict(entry)
            if item.product_id in seen:
                raise MalformedCartData(f"Duplicate line item for product {item.product_id!r}")
            seen.add(item.product_id)
            items.append(item)
        return cls(items=items)

    def to_list(self) -> List[Dict[str, Any]]:
        return [it.to_dict() for it in self.items]

    def find(self, product_id: ProductId) -> Optional[CartLineItem]:
        for it in self.items:
            if it.product_id == product_id:
                return it
        return None

    def total(self) -> float:
        return float(sum(it.line_total() for it in self.items))

    def count_items(self) -> int:
        return int(sum(it.quantity for it in self.items))