# app/services/cart.py
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
import asyncio
import logging

from app.models.cart import Cart, CartLineItem, ProductId
from app.models.product import Product

logger = logging.getLogger(__name__)


class CartStore:
    """
    Owns the shopping cart and its durable mirror.

    Every mutation rewrites the whole cart through `storage.save`; the cart
    is hydrated once from `storage.load` when the store is built. Messages
    go to `notifier.notify(message, level=...)`; a broken notifier is logged
    and never fails the cart operation.

    add_to_cart may wait `add_delay` seconds before applying (a loading state
    for the UI). The merge happens after the wait, against whatever the cart
    holds at that moment, so adds that overlap never overwrite each other.
    """

    def __init__(self, storage, notifier=None, add_delay: float = 0.0):
        self.storage = storage
        self.notifier = notifier
        self.add_delay = max(0.0, float(add_delay or 0.0))
        self._cart: Cart = storage.load()
        self._pending_adds = 0

    # --- reads ---

    @property
    def is_loading(self) -> bool:
        return self._pending_adds > 0

    @property
    def items(self) -> List[CartLineItem]:
        return [it.copy() for it in self._cart.items]

    def get_item(self, product_id: ProductId) -> Optional[CartLineItem]:
        item = self._cart.find(product_id)
        return item.copy() if item else None

    def get_cart_total(self) -> float:
        return self._cart.total()

    def get_cart_count(self) -> int:
        return self._cart.count_items()

    # --- writes ---

    async def add_to_cart(self, product: Union[Product, Dict[str, Any]], quantity: int = 1) -> CartLineItem:
        if isinstance(product, dict):
            product = Product.from_dict(product)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"quantity must be a positive integer, got {quantity!r}")

        self._pending_adds += 1
        try:
            if self.add_delay:
                await asyncio.sleep(self.add_delay)
            existing = self._cart.find(product.id)
            if existing is not None:
                existing.quantity += quantity
                item = existing
                message = f"Updated {product.name} quantity in cart"
            else:
                item = CartLineItem.from_product(product, quantity)
                self._cart.items.append(item)
                message = f"Added {product.name} to cart"
            self._commit()
        finally:
            self._pending_adds -= 1

        self._notify(message, level="success")
        return item.copy()

    def remove_from_cart(self, product_id: ProductId) -> bool:
        item = self._cart.find(product_id)
        if item is None:
            return False
        self._cart.items = [it for it in self._cart.items if it.product_id != product_id]
        self._commit()
        self._notify(f"Removed {item.name} from cart", level="info")
        return True

    def update_quantity(self, product_id: ProductId, new_quantity: int) -> Optional[CartLineItem]:
        """
        Set an item's quantity. Zero or less removes the item. Returns the
        updated item, or None when nothing is left for that product.
        """
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise ValueError(f"quantity must be an integer, got {new_quantity!r}")
        if new_quantity <= 0:
            self.remove_from_cart(product_id)
            return None
        item = self._cart.find(product_id)
        if item is None:
            return None
        item.quantity = new_quantity
        self._commit()
        return item.copy()

    def clear_cart(self) -> None:
        self._cart = Cart()
        self._commit()
        self._notify("Cart cleared", level="info")

    def reload(self) -> None:
        """Drop in-memory state and hydrate again from storage."""
        self._cart = self.storage.load()

    def _commit(self) -> None:
        self.storage.save(self._cart)

    def _notify(self, message: str, level: str) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(message, level=level)
        except Exception:
            logger.exception("Notification sink failed for %r", message)
