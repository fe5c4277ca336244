from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List
import uuid

from app.services.cart import CartStore


class EmptyCartError(ValueError):
    pass


@dataclass(frozen=True)
class PricingRules:
    free_shipping_threshold: float = 100.0
    shipping_fee: float = 9.99
    tax_rate: float = 0.08

    @classmethod
    def from_settings(cls, settings) -> "PricingRules":
        return cls(
            free_shipping_threshold=float(settings.FREE_SHIPPING_THRESHOLD),
            shipping_fee=float(settings.SHIPPING_FEE),
            tax_rate=float(settings.TAX_RATE),
        )


@dataclass
class OrderSummary:
    item_count: int
    subtotal: float
    shipping: float
    tax: float
    total: float
    free_shipping_remaining: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_order_summary(subtotal: float, item_count: int, rules: PricingRules) -> OrderSummary:
    """
    Shipping is free strictly above the threshold. Tax applies to the
    subtotal only.
    """
    shipping = 0.0 if subtotal > rules.free_shipping_threshold else rules.shipping_fee
    tax = subtotal * rules.tax_rate
    remaining = max(0.0, rules.free_shipping_threshold - subtotal) if shipping else 0.0
    return OrderSummary(
        item_count=int(item_count),
        subtotal=round(subtotal, 2),
        shipping=round(shipping, 2),
        tax=round(tax, 2),
        total=round(subtotal + shipping + tax, 2),
        free_shipping_remaining=round(remaining, 2),
    )


def summarize_cart(store: CartStore, rules: PricingRules) -> OrderSummary:
    return build_order_summary(store.get_cart_total(), store.get_cart_count(), rules)


def place_order(store: CartStore, shipping_address: Dict[str, Any], rules: PricingRules) -> Dict[str, Any]:
    """
    Turn the current cart into an order confirmation and empty the cart.
    Nothing is charged; the payment details are only validated upstream.
    """
    items = store.items
    if not items:
        raise EmptyCartError("Cannot check out an empty cart")
    summary = summarize_cart(store, rules)
    lines: List[Dict[str, Any]] = [it.to_dict() for it in items]
    confirmation = {
        "order_id": uuid.uuid4().hex,
        "placed_at": datetime.utcnow().isoformat(sep=" "),
        "items": lines,
        "summary": summary.to_dict(),
        "shipping_address": dict(shipping_address),
    }
    store.clear_cart()
    return confirmation
