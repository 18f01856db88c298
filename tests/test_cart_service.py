import pytest

from app.core.errors import NotFound
from app.models.cart import Cart
from app.services import cart_service
from tests.conftest import line


@pytest.mark.asyncio
async def test_cart_is_created_on_first_access(world):
    cart = await cart_service.get_cart(world.customer)
    assert cart.items == []
    assert (await cart_service.get_cart(world.customer)).id == cart.id


@pytest.mark.asyncio
async def test_adding_same_item_merges_quantity(world):
    await cart_service.add_item(world.customer, line(world.outlet.id, quantity=1))
    cart = await cart_service.add_item(world.customer, line(world.outlet.id, quantity=2))

    assert len(cart.items) == 1
    assert cart.items[0]["quantity"] == 3
    assert cart.items[0]["outletId"] == str(world.outlet.id)


@pytest.mark.asyncio
async def test_update_to_zero_removes_line(world):
    await cart_service.add_item(world.customer, line(world.outlet.id, item_id="a"))
    await cart_service.add_item(world.customer, line(world.outlet.id, item_id="b"))

    cart = await cart_service.update_item(world.customer, "a", 4)
    assert [i["quantity"] for i in cart.items if i["itemId"] == "a"] == [4]

    cart = await cart_service.update_item(world.customer, "a", 0)
    assert [i["itemId"] for i in cart.items] == ["b"]

    cart = await cart_service.remove_item(world.customer, "b")
    assert cart.items == []


@pytest.mark.asyncio
async def test_update_missing_cart_or_item(world):
    with pytest.raises(NotFound, match="Cart not found"):
        await cart_service.update_item(world.customer, "a", 1)

    await cart_service.get_cart(world.customer)
    with pytest.raises(NotFound, match="Item not found"):
        await cart_service.update_item(world.customer, "a", 1)


@pytest.mark.asyncio
async def test_clear_cart_is_idempotent(world):
    await cart_service.add_item(world.customer, line(world.outlet.id))

    first = await cart_service.clear_cart(world.customer.user_id)
    second = await cart_service.clear_cart(world.customer.user_id)

    assert first.items == []
    assert second.id == first.id
    assert await Cart.filter(user_id=world.customer.user_id).count() == 1
    # No cart at all is fine too
    assert await cart_service.clear_cart(world.owner.user_id) is None


@pytest.mark.asyncio
async def test_sync_replaces_all_lines(world):
    await cart_service.add_item(world.customer, line(world.outlet.id, item_id="old"))

    cart = await cart_service.sync_cart(world.customer, [
        line(world.outlet.id, item_id="x", quantity=2),
        line(world.outlet.id, item_id="y"),
    ])
    assert [(i["itemId"], i["quantity"]) for i in cart.items] == [("x", 2), ("y", 1)]
