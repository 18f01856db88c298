"""
Outlet categories and stock inventory.

Every write re-reads the manager assignment from the store. Explicit nulls in
an update mean "leave as is".
"""
import logging
from typing import Any, Dict, List

from app.core.errors import NotFound, ValidationFailed
from app.core.security import Principal
from app.models.catalog import Category, InventoryItem
from app.services.access import ManagerSource, as_uuid, ensure_outlet_access

log = logging.getLogger("catalog_service")


# ----------- Categories -----------

async def create_category(principal: Principal, outlet_id, data: Dict[str, Any]) -> Category:
    outlet, _ = await ensure_outlet_access(principal, outlet_id, ManagerSource.STORE)

    if await Category.filter(name=data["name"], outlet_id=outlet.id).exists():
        raise ValidationFailed("Category already exists for this outlet")

    category = await Category.create(outlet_id=outlet.id, **data)
    log.info(f"Category '{category.name}' created for outlet {outlet.id}")
    return category


async def list_categories(outlet_id) -> List[Category]:
    """Active categories, by sort order then name. Public."""
    return await Category.filter(
        outlet_id=as_uuid(outlet_id, "Outlet"), is_active=True
    ).order_by("sort_order", "name")


async def _category_with_access(principal: Principal, category_id) -> Category:
    category = await Category.get_or_none(id=as_uuid(category_id, "Category"))
    if not category:
        raise NotFound("Category not found")
    await ensure_outlet_access(principal, category.outlet_id, ManagerSource.STORE)
    return category


async def update_category(principal: Principal, category_id, data: Dict[str, Any]) -> Category:
    category = await _category_with_access(principal, category_id)
    data = {k: v for k, v in data.items() if v is not None}

    new_name = data.get("name")
    if new_name and new_name != category.name:
        if await Category.filter(name=new_name, outlet_id=category.outlet_id).exclude(id=category.id).exists():
            raise ValidationFailed("Category already exists for this outlet")

    category.update_from_dict(data)
    await category.save()
    return category


async def delete_category(principal: Principal, category_id) -> None:
    category = await _category_with_access(principal, category_id)
    await category.delete()
    log.info(f"Category {category.id} deleted")


# ----------- Inventory -----------

async def list_inventory(principal: Principal, outlet_id) -> List[InventoryItem]:
    outlet, _ = await ensure_outlet_access(principal, outlet_id, ManagerSource.STORE)
    return await InventoryItem.filter(outlet_id=outlet.id).order_by("category", "item_name")


async def create_inventory_item(principal: Principal, outlet_id, data: Dict[str, Any]) -> InventoryItem:
    outlet, _ = await ensure_outlet_access(principal, outlet_id, ManagerSource.STORE)
    fields = {k: v for k, v in data.items() if v is not None}
    item = await InventoryItem.create(outlet_id=outlet.id, **fields)
    log.info(f"Inventory item '{item.item_name}' created for outlet {outlet.id}")
    return item


async def _inventory_with_access(principal: Principal, item_id) -> InventoryItem:
    item = await InventoryItem.get_or_none(id=as_uuid(item_id, "Inventory item"))
    if not item:
        raise NotFound("Inventory item not found")
    await ensure_outlet_access(principal, item.outlet_id, ManagerSource.STORE)
    return item


async def update_inventory_item(principal: Principal, item_id, data: Dict[str, Any]) -> InventoryItem:
    item = await _inventory_with_access(principal, item_id)
    # The owning outlet cannot be changed
    data = {k: v for k, v in data.items() if v is not None and k != "outlet_id"}
    item.update_from_dict(data)
    await item.save()
    return item


async def delete_inventory_item(principal: Principal, item_id) -> None:
    item = await _inventory_with_access(principal, item_id)
    await item.delete()
    log.info(f"Inventory item {item.id} deleted")
