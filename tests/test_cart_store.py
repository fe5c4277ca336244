import asyncio
import json

import pytest

from app.database import CartStorage, InMemoryKV
from app.models.product import Product
from app.services.cart import CartStore


def _product(pid, name="Thing", price=5.0, images=("img.png",)):
    return Product(id=pid, name=name, price=price, images=list(images))


@pytest.mark.asyncio
async def test_add_widget_to_empty_cart(cart_store, widget, notifier):
    item = await cart_store.add_to_cart(widget, 2)

    assert item.product_id == 1
    assert item.quantity == 2
    assert item.image == "x"
    assert len(cart_store.items) == 1
    assert cart_store.get_cart_total() == 20
    assert cart_store.get_cart_count() == 2
    assert notifier.sent == [("success", "Added Widget to cart")]


@pytest.mark.asyncio
async def test_adding_same_product_merges_quantity(cart_store, widget, notifier):
    await cart_store.add_to_cart(widget, 2)
    await cart_store.add_to_cart(widget, 3)

    assert len(cart_store.items) == 1
    assert cart_store.items[0].quantity == 5
    assert cart_store.get_cart_total() == 50
    assert notifier.messages[-1] == "Updated Widget quantity in cart"


@pytest.mark.asyncio
@pytest.mark.parametrize("q1,q2", [(1, 1), (2, 7), (10, 3)])
async def test_count_grows_by_both_quantities(cart_store, q1, q2):
    await cart_store.add_to_cart(_product(99), 1)
    before = cart_store.get_cart_count()

    await cart_store.add_to_cart(_product(7), q1)
    await cart_store.add_to_cart(_product(7), q2)

    assert cart_store.get_item(7).quantity == q1 + q2
    assert cart_store.get_cart_count() == before + q1 + q2


@pytest.mark.asyncio
async def test_snapshot_is_not_resynced_with_product(cart_store):
    product = _product(3, name="Lamp", price=12.5)
    await cart_store.add_to_cart(product)
    product.price = 99.0
    product.name = "Renamed Lamp"

    await cart_store.add_to_cart(product)

    item = cart_store.get_item(3)
    assert item.name == "Lamp"
    assert item.price == 12.5
    assert item.quantity == 2


@pytest.mark.asyncio
async def test_product_without_images_has_no_image(cart_store):
    item = await cart_store.add_to_cart(_product(4, images=()))
    assert item.image is None


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [0, -1, 1.5, True])
async def test_add_rejects_non_positive_quantity(cart_store, bad):
    with pytest.raises(ValueError):
        await cart_store.add_to_cart(_product(1), bad)
    assert cart_store.items == []
    assert not cart_store.is_loading


@pytest.mark.asyncio
async def test_total_matches_line_items_after_mixed_operations(cart_store):
    await cart_store.add_to_cart(_product(1, price=2.5), 4)
    await cart_store.add_to_cart(_product(2, price=10.0), 1)
    await cart_store.add_to_cart(_product(3, price=0.99), 3)
    cart_store.update_quantity(2, 6)
    cart_store.remove_from_cart(3)
    await cart_store.add_to_cart(_product(1, price=2.5), 1)

    expected = sum(it.price * it.quantity for it in cart_store.items)
    assert cart_store.get_cart_total() == pytest.approx(expected)
    assert cart_store.get_cart_total() == pytest.approx(2.5 * 5 + 10.0 * 6)
    assert cart_store.get_cart_count() == 11


@pytest.mark.asyncio
@pytest.mark.parametrize("qty", [0, -1])
async def test_update_to_zero_or_less_removes_item(cart_store, widget, notifier, qty):
    await cart_store.add_to_cart(widget, 2)

    assert cart_store.update_quantity(1, qty) is None
    assert cart_store.items == []
    assert notifier.messages[-1] == "Removed Widget from cart"

    sent = len(notifier.sent)
    cart_store.update_quantity(1, qty)
    assert cart_store.items == []
    assert len(notifier.sent) == sent


@pytest.mark.asyncio
async def test_update_quantity_replaces_in_place(cart_store):
    await cart_store.add_to_cart(_product(1))
    await cart_store.add_to_cart(_product(2))

    updated = cart_store.update_quantity(1, 9)

    assert updated.quantity == 9
    assert [it.product_id for it in cart_store.items] == [1, 2]


def test_update_missing_product_is_noop(cart_store, kv, storage):
    assert cart_store.update_quantity(42, 3) is None
    assert cart_store.items == []
    assert storage.key not in kv.data


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [0.5, 2.0, "3", True, None])
async def test_update_rejects_non_integer_quantity(cart_store, storage, bad):
    await cart_store.add_to_cart(_product(1), 3)
    await cart_store.add_to_cart(_product(2), 1)

    with pytest.raises(ValueError):
        cart_store.update_quantity(1, bad)

    assert [(it.product_id, it.quantity) for it in cart_store.items] == [(1, 3), (2, 1)]
    reloaded = CartStore(storage)
    assert [(it.product_id, it.quantity) for it in reloaded.items] == [(1, 3), (2, 1)]


@pytest.mark.asyncio
async def test_remove_missing_product_changes_nothing(cart_store, kv, storage, notifier):
    await cart_store.add_to_cart(_product(1), 2)
    stored = kv.data[storage.key]
    sent = list(notifier.sent)

    assert cart_store.remove_from_cart(555) is False

    assert kv.data[storage.key] == stored
    assert notifier.sent == sent
    assert len(cart_store.items) == 1


@pytest.mark.asyncio
async def test_clear_cart_empties_and_notifies(cart_store, notifier, kv, storage):
    await cart_store.add_to_cart(_product(1), 2)
    await cart_store.add_to_cart(_product(2), 1)

    cart_store.clear_cart()

    assert cart_store.items == []
    assert cart_store.get_cart_count() == 0
    assert json.loads(kv.data[storage.key]) == []
    assert notifier.sent[-1] == ("info", "Cart cleared")


@pytest.mark.asyncio
async def test_every_mutation_rewrites_the_mirror(cart_store, kv, storage):
    await cart_store.add_to_cart(_product(1, name="A", price=3.0), 2)
    assert json.loads(kv.data[storage.key]) == [
        {"productId": 1, "name": "A", "price": 3.0, "image": "img.png", "quantity": 2}
    ]

    cart_store.update_quantity(1, 5)
    assert json.loads(kv.data[storage.key])[0]["quantity"] == 5

    cart_store.remove_from_cart(1)
    assert json.loads(kv.data[storage.key]) == []


@pytest.mark.asyncio
async def test_round_trip_through_storage(cart_store, storage, notifier):
    await cart_store.add_to_cart(_product("sku-b", name="B", price=1.25), 3)
    await cart_store.add_to_cart(_product(1, name="A", price=10.0), 1)
    await cart_store.add_to_cart(_product("sku-c", name="C", price=0.0, images=()), 2)
    before = cart_store.items

    cart_store.reload()
    assert cart_store.items == before

    fresh = CartStore(storage, notifier=notifier)
    assert fresh.items == before
    assert fresh.get_cart_total() == cart_store.get_cart_total()


def test_items_are_copies(cart_store):
    asyncio.run(cart_store.add_to_cart(_product(1), 1))
    cart_store.items[0].quantity = 100
    assert cart_store.get_cart_count() == 1


@pytest.mark.asyncio
async def test_overlapping_adds_are_all_counted(storage, notifier):
    store = CartStore(storage, notifier=notifier, add_delay=0.01)
    product = _product(1, price=2.0)

    await asyncio.gather(
        store.add_to_cart(product, 1),
        store.add_to_cart(product, 2),
        store.add_to_cart(product, 3),
        store.add_to_cart(_product(2), 1),
    )

    assert store.get_item(1).quantity == 6
    assert store.get_cart_count() == 7
    assert len(store.items) == 2


@pytest.mark.asyncio
async def test_is_loading_during_add_delay(storage):
    store = CartStore(storage, add_delay=0.05)
    assert not store.is_loading

    task = asyncio.ensure_future(store.add_to_cart(_product(1)))
    await asyncio.sleep(0)
    assert store.is_loading
    assert store.items == []

    await task
    assert not store.is_loading
    assert store.get_cart_count() == 1


class _BrokenNotifier:
    def notify(self, message, level="info"):
        raise RuntimeError("toast container not mounted")


@pytest.mark.asyncio
async def test_failing_notifier_does_not_fail_cart(storage):
    store = CartStore(storage, notifier=_BrokenNotifier())

    await store.add_to_cart(_product(1), 2)
    store.remove_from_cart(1)
    await store.add_to_cart(_product(2))
    store.clear_cart()

    assert store.items == []


class _FullDiskKV(InMemoryKV):
    def set(self, key, value):
        raise OSError("No space left on device")


@pytest.mark.asyncio
async def test_persistence_failure_keeps_cart_usable(notifier, caplog):
    store = CartStore(CartStorage(_FullDiskKV(), "shopflow-cart"), notifier=notifier)

    await store.add_to_cart(_product(1), 2)

    assert store.get_cart_count() == 2
    assert notifier.messages == ["Added Thing to cart"]
    assert "Failed to persist cart" in caplog.text
