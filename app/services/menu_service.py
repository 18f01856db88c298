"""
Outlet menus: the items customers browse and add to carts.

Writes re-read the manager assignment from the store. The vendor's own menu
listing is read-only and trusts the token's assignment snapshot.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from tortoise.expressions import Q

from app.core.errors import AccessDenied, AuthenticationFailed, NotFound
from app.core.security import Guest, Manager, Owner, Principal
from app.models.catalog import MenuItem
from app.models.restaurant import Outlet, Restaurant
from app.schemas.menu import MenuItemOut, MenuSyncResponse
from app.services.access import ManagerSource, accessible_outlet_ids, as_uuid, ensure_outlet_access

log = logging.getLogger("menu_service")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MENU_ORDERING = ("category", "item_name")


async def create_menu_item(principal: Principal, outlet_id, data: Dict[str, Any]) -> MenuItem:
    outlet, _ = await ensure_outlet_access(principal, outlet_id, ManagerSource.STORE)
    fields = {k: v for k, v in data.items() if v is not None}
    item = await MenuItem.create(outlet_id=outlet.id, **fields)
    log.info(f"Menu item '{item.item_name}' created for outlet {outlet.id}")
    return item


async def get_menu_item(item_id) -> MenuItem:
    item = await MenuItem.get_or_none(id=as_uuid(item_id, "Item"))
    if not item:
        raise NotFound("Item not found")
    return item


async def _item_with_access(principal: Principal, item_id) -> MenuItem:
    item = await get_menu_item(item_id)
    await ensure_outlet_access(principal, item.outlet_id, ManagerSource.STORE)
    return item


async def update_menu_item(principal: Principal, item_id, data: Dict[str, Any]) -> MenuItem:
    item = await _item_with_access(principal, item_id)
    data = {k: v for k, v in data.items() if v is not None and k != "outlet_id"}
    item.update_from_dict(data)
    await item.save()
    return item


async def update_menu_item_photo(principal: Principal, item_id, file_url: str) -> MenuItem:
    """Stores the URL of a photo the client has already uploaded."""
    item = await _item_with_access(principal, item_id)
    item.item_photo = file_url
    await item.save()
    log.info(f"Photo updated for menu item {item.id}")
    return item


async def delete_menu_item(principal: Principal, item_id) -> None:
    item = await _item_with_access(principal, item_id)
    await item.delete()
    log.info(f"Menu item {item.id} deleted")


async def list_outlet_menu(principal: Principal, outlet_id) -> List[MenuItem]:
    """Full menu for the outlet's own staff, unavailable items included."""
    outlet, _ = await ensure_outlet_access(principal, outlet_id, ManagerSource.CLAIMS)
    return await MenuItem.filter(outlet_id=outlet.id).order_by(*MENU_ORDERING)


async def view_outlet_menu(restaurant_name: str, outlet_name: str) -> Tuple[Outlet, List[MenuItem]]:
    """Public menu page, addressed by restaurant and outlet names."""
    restaurant = await Restaurant.filter(name=restaurant_name).first()
    if not restaurant:
        raise NotFound("Restaurant not found")
    outlet = await Outlet.filter(restaurant_id=restaurant.id, name=outlet_name).first()
    if not outlet:
        raise NotFound("Outlet not found")
    items = await MenuItem.filter(outlet_id=outlet.id).order_by(*MENU_ORDERING)
    return outlet, items


async def sync_vendor_menu(principal: Principal, since: Optional[datetime] = None) -> MenuSyncResponse:
    """Menu items created or changed at or after `since` across the caller's outlets."""
    if isinstance(principal, Guest):
        raise AuthenticationFailed("Token required")
    if not isinstance(principal, (Owner, Manager)):
        raise AccessDenied("Access denied")

    synced_at = datetime.now(timezone.utc)
    since = since or EPOCH
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)

    outlet_ids = await accessible_outlet_ids(principal)
    if not outlet_ids:
        return MenuSyncResponse(items=[], synced_at=synced_at)

    items = await MenuItem.filter(
        Q(updated_at__gte=since) | Q(created_at__gte=since),
        outlet_id__in=outlet_ids,
    ).order_by("-updated_at")
    return MenuSyncResponse(items=[MenuItemOut.model_validate(i) for i in items], synced_at=synced_at)
