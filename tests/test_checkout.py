import pytest

from app.models.product import Product
from app.services.checkout import (
    EmptyCartError,
    PricingRules,
    build_order_summary,
    place_order,
    summarize_cart,
)

RULES = PricingRules(free_shipping_threshold=100.0, shipping_fee=9.99, tax_rate=0.08)


def test_summary_below_free_shipping():
    s = build_order_summary(50.0, 3, RULES)
    assert s.item_count == 3
    assert s.subtotal == 50.0
    assert s.shipping == 9.99
    assert s.tax == 4.0
    assert s.total == 63.99
    assert s.free_shipping_remaining == 50.0


def test_shipping_is_free_only_above_threshold():
    at_threshold = build_order_summary(100.0, 1, RULES)
    assert at_threshold.shipping == 9.99
    assert at_threshold.free_shipping_remaining == 0.0

    above = build_order_summary(150.0, 1, RULES)
    assert above.shipping == 0.0
    assert above.tax == 12.0
    assert above.total == 162.0
    assert above.free_shipping_remaining == 0.0


def test_empty_cart_summary():
    s = build_order_summary(0.0, 0, RULES)
    assert s.shipping == 9.99
    assert s.total == 9.99


@pytest.mark.asyncio
async def test_summarize_cart_uses_cart_total_and_count(cart_store):
    await cart_store.add_to_cart(Product(id=1, name="A", price=20.0), 2)
    await cart_store.add_to_cart(Product(id=2, name="B", price=5.0), 1)

    s = summarize_cart(cart_store, RULES)
    assert s.subtotal == 45.0
    assert s.item_count == 3
    assert s.total == pytest.approx(45.0 + 9.99 + 3.6)


@pytest.mark.asyncio
async def test_place_order_clears_cart(cart_store, notifier):
    await cart_store.add_to_cart(Product(id=1, name="A", price=120.0, images=["a.jpg"]), 1)

    confirmation = place_order(cart_store, {"city": "Springfield"}, RULES)

    assert len(confirmation["order_id"]) == 32
    assert confirmation["items"] == [
        {"productId": 1, "name": "A", "price": 120.0, "image": "a.jpg", "quantity": 1}
    ]
    assert confirmation["summary"]["shipping"] == 0.0
    assert confirmation["summary"]["total"] == 129.6
    assert confirmation["shipping_address"] == {"city": "Springfield"}
    assert cart_store.items == []
    assert notifier.messages[-1] == "Cart cleared"


def test_place_order_rejects_empty_cart(cart_store):
    with pytest.raises(EmptyCartError):
        place_order(cart_store, {}, RULES)


def test_rules_from_settings(settings):
    rules = PricingRules.from_settings(settings)
    assert rules == RULES
