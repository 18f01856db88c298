import logging
from typing import Dict, List, Optional

from app.core.errors import NotFound
from app.core.security import Authenticated
from app.models.cart import Cart

log = logging.getLogger("cart_service")


def _line(item: Dict) -> Dict:
    """Normalizes a cart line into its stored snapshot shape."""
    return {
        "itemId": str(item["itemId"]),
        "itemName": item["itemName"],
        "itemPrice": float(item["itemPrice"]),
        "quantity": int(item.get("quantity") or 1),
        "itemPhoto": item.get("itemPhoto"),
        "outletId": str(item["outletId"]),
    }


async def get_cart(principal: Authenticated) -> Cart:
    """Returns the caller's cart, creating an empty one on first access."""
    cart, created = await Cart.get_or_create(user_id=principal.user_id, defaults={"items": []})
    if created:
        log.info(f"Created cart for user {principal.user_id}")
    return cart


async def add_item(principal: Authenticated, item: Dict) -> Cart:
    """Adds a line, or increases the quantity when the item is already in the cart."""
    cart = await get_cart(principal)
    line = _line(item)
    items: List[Dict] = list(cart.items or [])

    for existing in items:
        if existing["itemId"] == line["itemId"]:
            existing["quantity"] += line["quantity"]
            break
    else:
        items.append(line)

    cart.items = items
    await cart.save()
    return cart


async def update_item(principal: Authenticated, item_id: str, quantity: int) -> Cart:
    cart = await Cart.get_or_none(user_id=principal.user_id)
    if not cart:
        raise NotFound("Cart not found")

    items: List[Dict] = list(cart.items or [])
    index = next((i for i, line in enumerate(items) if line["itemId"] == str(item_id)), None)
    if index is None:
        raise NotFound("Item not found in cart")

    if quantity <= 0:
        items.pop(index)
    else:
        items[index]["quantity"] = quantity

    cart.items = items
    await cart.save()
    return cart


async def remove_item(principal: Authenticated, item_id: str) -> Cart:
    cart = await Cart.get_or_none(user_id=principal.user_id)
    if not cart:
        raise NotFound("Cart not found")

    cart.items = [line for line in (cart.items or []) if line["itemId"] != str(item_id)]
    await cart.save()
    return cart


async def clear_cart(user_id) -> Optional[Cart]:
    """
    Empties the user's cart. The cart row is kept. A user without a cart is
    not an error, and clearing an empty cart is a no-op.
    """
    cart = await Cart.get_or_none(user_id=user_id)
    if not cart:
        return None
    if cart.items:
        cart.items = []
        await cart.save()
    return cart


async def sync_cart(principal: Authenticated, items: List[Dict]) -> Cart:
    """Replaces every line in the cart with the given ones."""
    cart = await get_cart(principal)
    cart.items = [_line(item) for item in items]
    await cart.save()
    return cart
