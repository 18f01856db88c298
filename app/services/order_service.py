"""
Order lifecycle: placement, status and payment transitions, vendor views and
the sync fallback.

Every state change is published through the injected notifier after it has
been persisted. Publishing is best effort; a room with no sockets is a no-op.
"""
import logging
import random
import time
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from tortoise import timezone
from tortoise.expressions import Q

from app.core.config import ORDER_NUMBER_MAX_ATTEMPTS
from app.core.errors import AccessDenied, AuthenticationFailed, Conflict, NotFound, ValidationFailed
from app.core.security import Authenticated, Guest, Manager, Owner, Principal
from app.models.order import (
    TERMINAL_STATUSES,
    Order,
    OrderStatus,
    OrderType,
    PaymentMethod,
    PaymentStatus,
)
from app.models.restaurant import Outlet, Restaurant
from app.models.user import User
from app.realtime.notifier import NEW_ORDER, ORDER_CREATED, ORDER_UPDATED, PAYMENT_UPDATED, Notifier
from app.realtime.rooms import outlet_room, user_room
from app.schemas.order import OrderOut, OrderSyncResponse, OrderVerifyResponse
from app.services import cart_service
from app.services.access import (
    ManagerSource,
    accessible_outlet_ids,
    as_uuid,
    ensure_outlet_access,
)

log = logging.getLogger("order_service")

EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def _enum_value(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationFailed(f"Valid {label} is required ({allowed})")


def make_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 9999)}"


async def generate_order_number() -> str:
    """Picks an order number not yet in the store, retrying on collision."""
    for _ in range(ORDER_NUMBER_MAX_ATTEMPTS):
        order_number = make_order_number()
        if not await Order.filter(order_number=order_number).exists():
            return order_number
    # The unique index still rejects a duplicate at insert time
    log.warning(f"No free order number after {ORDER_NUMBER_MAX_ATTEMPTS} attempts")
    return order_number


# ----------- Population -----------

async def populate_orders(orders: Iterable[Order]) -> List[OrderOut]:
    """Attaches outlet, restaurant and customer display fields, batching lookups."""
    orders = list(orders)
    outlet_ids = {o.outlet_id for o in orders}
    restaurant_ids = {o.restaurant_id for o in orders}
    user_ids = {o.user_id for o in orders if o.user_id}

    outlets = {o.id: o for o in await Outlet.filter(id__in=outlet_ids)} if outlet_ids else {}
    restaurants = {r.id: r for r in await Restaurant.filter(id__in=restaurant_ids)} if restaurant_ids else {}
    users = {u.id: u for u in await User.filter(id__in=user_ids)} if user_ids else {}

    populated = []
    for order in orders:
        outlet = outlets.get(order.outlet_id)
        restaurant = restaurants.get(order.restaurant_id)
        user = users.get(order.user_id) if order.user_id else None
        populated.append(OrderOut(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            user={"id": user.id, "name": user.name, "email": user.email} if user else None,
            customer_info=order.customer_info,
            outlet_id=order.outlet_id,
            outlet={"id": outlet.id, "name": outlet.name, "location": outlet.location} if outlet else None,
            restaurant_id=order.restaurant_id,
            restaurant={"id": restaurant.id, "name": restaurant.name} if restaurant else None,
            items=order.items,
            total_price=order.total_price,
            delivery_address=order.delivery_address,
            payment_method=order.payment_method,
            order_type=order.order_type,
            status=order.status,
            payment_status=order.payment_status,
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
        ))
    return populated


async def populate_order(order: Order) -> OrderOut:
    return (await populate_orders([order]))[0]


async def _get_order(order_id) -> Order:
    order = await Order.get_or_none(id=as_uuid(order_id, "Order"))
    if not order:
        raise NotFound("Order not found")
    return order


async def _conditional_update(order: Order, **changes) -> Order:
    """
    Writes the changes only if nobody else has written the order since it was
    read. Raises Conflict when the version token no longer matches.
    """
    updated = await Order.filter(id=order.id, version=order.version).update(
        version=order.version + 1,
        updated_at=timezone.now(),
        **changes,
    )
    if not updated:
        raise Conflict("Order was modified concurrently, reload and retry")
    return await Order.get(id=order.id)


async def _publish_to_order_rooms(notifier: Notifier, event: str, order: OrderOut) -> None:
    payload = order.to_wire()
    if order.user_id:
        await notifier.publish(user_room(order.user_id), event, payload)
    await notifier.publish(outlet_room(order.outlet_id), event, payload)


# ----------- Placement -----------

def _validate_items(items: List[Dict[str, Any]]) -> str:
    if not items:
        raise ValidationFailed("Cart is empty")

    outlet_ids = {str(item.get("outletId") or "") for item in items}
    if "" in outlet_ids:
        raise ValidationFailed("Every item must carry an outletId")
    # One order belongs to exactly one outlet
    if len(outlet_ids) > 1:
        raise ValidationFailed("All items in an order must come from the same outlet")
    return outlet_ids.pop()


def _validate_customer_info(customer_info: Optional[Dict[str, Any]]) -> Dict[str, str]:
    info = customer_info or {}
    if not (info.get("name") and info.get("email") and info.get("phone")):
        raise ValidationFailed("Customer information is required for guest orders")
    return {"name": info["name"], "email": info["email"], "phone": info["phone"]}


async def create_order(
    principal: Principal,
    items: List[Dict[str, Any]],
    total_price,
    delivery_address: Optional[str],
    payment_method,
    order_type,
    customer_info: Optional[Dict[str, Any]],
    notifier: Notifier,
) -> OrderOut:
    """
    Turns a cart into an order.

    Authenticated callers are attributed by user id and have their cart
    emptied; guests must supply complete customerInfo. The order's outlet is
    the outlet all items share; its restaurant is the outlet's parent.
    """
    outlet_id = _validate_items(items)
    order_type = _enum_value(OrderType, order_type, "order type")
    payment_method = _enum_value(PaymentMethod, payment_method, "payment method")

    if total_price is None:
        raise ValidationFailed("Total price is required")
    total_price = Decimal(str(total_price))
    if total_price < 0:
        raise ValidationFailed("Total price cannot be negative")

    delivery_address = (delivery_address or "").strip()
    if order_type == OrderType.DELIVERY and not delivery_address:
        raise ValidationFailed("Delivery address is required for delivery orders")

    user_id = None
    guest_info = None
    if isinstance(principal, Guest):
        guest_info = _validate_customer_info(customer_info)
    else:
        user_id = principal.user_id

    outlet = await Outlet.get_or_none(id=as_uuid(outlet_id, "Outlet"))
    if not outlet:
        raise NotFound("Outlet not found")

    order = await Order.create(
        order_number=await generate_order_number(),
        user_id=user_id,
        customer_info=guest_info,
        outlet_id=outlet.id,
        restaurant_id=outlet.restaurant_id,
        items=[
            {
                "itemId": str(item["itemId"]),
                "itemName": item["itemName"],
                "itemPrice": float(item["itemPrice"]),
                "quantity": int(item["quantity"]),
                "itemPhoto": item.get("itemPhoto"),
            }
            for item in items
        ],
        total_price=total_price,
        delivery_address=delivery_address,
        payment_method=payment_method,
        order_type=order_type,
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
    )
    log.info(f"Order {order.order_number} placed at outlet {outlet.id} ({'user ' + user_id if user_id else 'guest'})")

    if user_id:
        await cart_service.clear_cart(user_id)

    populated = await populate_order(order)
    payload = populated.to_wire()
    await notifier.publish(outlet_room(outlet.id), NEW_ORDER, payload)
    if user_id:
        await notifier.publish(user_room(user_id), ORDER_CREATED, payload)
    return populated


# ----------- Transitions -----------

async def update_order_status(order_id, principal: Principal, new_status, notifier: Notifier) -> OrderOut:
    """
    Sets the order's status. Any authorized owner/manager may pick any value,
    except that delivered and cancelled orders are final. Setting the current
    status again changes nothing and publishes nothing.
    """
    new_status = _enum_value(OrderStatus, new_status, "status")
    order = await _get_order(order_id)
    await ensure_outlet_access(principal, order.outlet_id, ManagerSource.STORE)

    if order.status == new_status:
        return await populate_order(order)
    if order.status in TERMINAL_STATUSES:
        raise ValidationFailed(f"Order is already in a final state: {order.status.value}. Status cannot be updated.")

    old_status = order.status
    order = await _conditional_update(order, status=new_status)
    log.info(f"Order {order.order_number} status {old_status.value} -> {new_status.value}")

    populated = await populate_order(order)
    await _publish_to_order_rooms(notifier, ORDER_UPDATED, populated)
    return populated


async def update_payment_status(order_id, new_payment_status, notifier: Notifier) -> OrderOut:
    """
    Records a payment outcome. Callers are trusted service callers; the HTTP
    layer checks the service credential.

    A pending order that becomes paid is confirmed in the same write. A paid
    order is announced to the outlet again as new-order, since vendor views
    only list paid orders.
    """
    new_payment_status = _enum_value(PaymentStatus, new_payment_status, "payment status")
    order = await _get_order(order_id)

    if order.payment_status == new_payment_status:
        return await populate_order(order)

    changes = {"payment_status": new_payment_status}
    if new_payment_status == PaymentStatus.PAID and order.status == OrderStatus.PENDING:
        changes["status"] = OrderStatus.CONFIRMED

    old_payment_status = order.payment_status
    order = await _conditional_update(order, **changes)
    log.info(
        f"Order {order.order_number} payment {old_payment_status.value} -> {new_payment_status.value}"
        f" (status {order.status.value})"
    )

    populated = await populate_order(order)
    await _publish_to_order_rooms(notifier, PAYMENT_UPDATED, populated)
    if new_payment_status == PaymentStatus.PAID:
        await notifier.publish(outlet_room(populated.outlet_id), NEW_ORDER, populated.to_wire())
    return populated


# ----------- Reads -----------

async def get_order(order_id, principal: Principal) -> OrderOut:
    """The placing customer, or an owner/manager of the order's outlet."""
    order = await _get_order(order_id)
    if isinstance(principal, Guest):
        raise AuthenticationFailed("Token required")
    if order.user_id and str(order.user_id) == principal.user_id:
        return await populate_order(order)
    await ensure_outlet_access(principal, order.outlet_id, ManagerSource.STORE)
    return await populate_order(order)


async def get_user_orders(principal: Authenticated) -> List[OrderOut]:
    orders = await Order.filter(user_id=principal.user_id).order_by("-created_at")
    return await populate_orders(orders)


async def get_outlet_orders(outlet_id, principal: Principal, order_type: Optional[str] = None) -> List[OrderOut]:
    """Paid orders for an outlet, newest first. Unpaid orders are never listed."""
    outlet, _ = await ensure_outlet_access(principal, outlet_id, ManagerSource.STORE)

    query = Order.filter(outlet_id=outlet.id, payment_status=PaymentStatus.PAID)
    # Unknown filter values are ignored rather than rejected
    if order_type in {t.value for t in OrderType}:
        query = query.filter(order_type=OrderType(order_type))
    return await populate_orders(await query.order_by("-created_at"))


async def sync_vendor_orders(principal: Principal, since: Optional[datetime] = None) -> OrderSyncResponse:
    """
    Paid orders created or updated at or after `since` across the caller's
    outlets, most recently updated first. `synced_at` is the checkpoint for
    the next call; it is taken before querying so nothing written during the
    query falls between two syncs.
    """
    if isinstance(principal, Guest):
        raise AuthenticationFailed("Token required")
    if not isinstance(principal, (Owner, Manager)):
        raise AccessDenied("Access denied")

    synced_at = datetime.now(dt_timezone.utc)
    since = since or EPOCH
    if since.tzinfo is None:
        since = since.replace(tzinfo=dt_timezone.utc)

    outlet_ids = await accessible_outlet_ids(principal)
    if not outlet_ids:
        return OrderSyncResponse(orders=[], synced_at=synced_at)

    orders = await Order.filter(
        Q(updated_at__gte=since) | Q(created_at__gte=since),
        outlet_id__in=outlet_ids,
        payment_status=PaymentStatus.PAID,
    ).order_by("-updated_at")
    log.info(f"Sync for {principal.user_id}: {len(orders)} orders since {since.isoformat()}")
    return OrderSyncResponse(orders=await populate_orders(orders), synced_at=synced_at)


async def verify_payment(order_id) -> OrderVerifyResponse:
    order = await _get_order(order_id)
    return OrderVerifyResponse(
        id=order.id,
        order_number=order.order_number,
        payment_status=order.payment_status,
        status=order.status,
        total_price=order.total_price,
    )

