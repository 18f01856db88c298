import logging
from typing import Any, Dict, Iterable, List

from tortoise.transactions import in_transaction

from app.core.errors import AccessDenied, NotFound, ValidationFailed
from app.core.security import Authenticated, Principal
from app.models.cart import Cart
from app.models.restaurant import Outlet, Restaurant
from app.models.user import User, UserRole
from app.services.access import ManagerSource, as_uuid, ensure_outlet_access, ensure_owner, is_owner_of

log = logging.getLogger("outlet_service")


async def _delete_outlets(outlets: Iterable[Outlet]) -> None:
    """Removes outlets and their manager assignments. Categories, inventory and menus cascade."""
    for outlet in outlets:
        await outlet.managers.clear()
        await outlet.delete()


# ----------- Restaurants -----------

async def create_restaurant(principal: Principal, data: Dict[str, Any]) -> Restaurant:
    owner = ensure_owner(principal, "Only owners can create restaurants")
    fields = {k: v for k, v in data.items() if v is not None}
    restaurant = await Restaurant.create(owner_id=owner.user_id, **fields)
    log.info(f"Restaurant {restaurant.id} created by owner {owner.user_id}")
    return restaurant


async def list_my_restaurants(principal: Principal) -> List[Restaurant]:
    owner = ensure_owner(principal, "Only owners have restaurants")
    return await Restaurant.filter(owner_id=owner.user_id).prefetch_related("outlets").order_by("created_at")


async def list_all_restaurants() -> List[Restaurant]:
    """Public directory for customers."""
    return await Restaurant.all().prefetch_related("outlets").order_by("name")


async def get_restaurant(restaurant_id) -> Restaurant:
    restaurant = await Restaurant.filter(id=as_uuid(restaurant_id, "Restaurant")).prefetch_related(
        "owner", "outlets"
    ).first()
    if not restaurant:
        raise NotFound("Restaurant not found")
    return restaurant


async def get_restaurant_by_name(name: str) -> Restaurant:
    restaurant = await Restaurant.filter(name=name).prefetch_related("owner", "outlets").first()
    if not restaurant:
        raise NotFound("Restaurant not found")
    return restaurant


async def _owned_restaurant(principal: Principal, restaurant_id, message: str = "Only owners can manage outlets") -> Restaurant:
    owner = ensure_owner(principal, message)
    restaurant = await Restaurant.get_or_none(id=as_uuid(restaurant_id, "Restaurant"))
    if not restaurant:
        raise NotFound("Restaurant not found")
    if not is_owner_of(owner, restaurant.owner_id):
        raise AccessDenied("You don't own this restaurant")
    return restaurant


async def update_restaurant(principal: Principal, restaurant_id, data: Dict[str, Any]) -> Restaurant:
    restaurant = await _owned_restaurant(principal, restaurant_id, "Only owners can update restaurants")
    # Ownership is not transferable here
    data = {k: v for k, v in data.items() if v is not None and k != "owner_id"}
    restaurant.update_from_dict(data)
    await restaurant.save()
    return restaurant


async def delete_restaurant(principal: Principal, restaurant_id) -> None:
    """Owner only. Takes the restaurant's outlets and their manager assignments with it."""
    restaurant = await _owned_restaurant(principal, restaurant_id, "Only owners can delete restaurants")

    async with in_transaction():
        outlets = await Outlet.filter(restaurant_id=restaurant.id)
        await _delete_outlets(outlets)
        await restaurant.delete()
    log.info(f"Restaurant {restaurant.id} deleted with {len(outlets)} outlets")


# ----------- Outlets -----------

async def create_outlet(principal: Principal, restaurant_id, data: Dict[str, Any]) -> Outlet:
    """Creates an outlet under the caller's restaurant, within its outlet limit."""
    restaurant = await _owned_restaurant(principal, restaurant_id)

    async with in_transaction() as conn:
        current = await Outlet.filter(restaurant_id=restaurant.id).using_db(conn).count()
        if current >= restaurant.outlet_count:
            raise ValidationFailed(f"Outlet limit reached ({restaurant.outlet_count} outlets allowed)")

        fields = {k: v for k, v in data.items() if v is not None}
        outlet = await Outlet.create(restaurant_id=restaurant.id, using_db=conn, **fields)

    log.info(f"Outlet {outlet.id} created for restaurant {restaurant.id} ({current + 1}/{restaurant.outlet_count})")
    return outlet


async def get_outlet(outlet_id) -> Outlet:
    outlet = await Outlet.get_or_none(id=as_uuid(outlet_id, "Outlet"))
    if not outlet:
        raise NotFound("Outlet not found")
    return outlet


async def list_outlets(restaurant_id) -> List[Outlet]:
    restaurant = await Restaurant.get_or_none(id=as_uuid(restaurant_id, "Restaurant"))
    if not restaurant:
        raise NotFound("Restaurant not found")
    return await Outlet.filter(restaurant_id=restaurant.id).order_by("created_at")


async def update_outlet(principal: Principal, outlet_id, data: Dict[str, Any]) -> Outlet:
    outlet, _ = await ensure_outlet_access(principal, outlet_id, ManagerSource.STORE)
    # The parent restaurant is fixed
    data = {k: v for k, v in data.items() if v is not None and k != "restaurant_id"}
    outlet.update_from_dict(data)
    await outlet.save()
    return outlet


async def delete_outlet(principal: Principal, outlet_id) -> None:
    """Owner only. The outlet is also removed from every manager's assignments."""
    owner = ensure_owner(principal, "Only owners can delete outlets")
    outlet, restaurant = await ensure_outlet_access(owner, outlet_id, ManagerSource.STORE)

    async with in_transaction():
        await _delete_outlets([outlet])
    log.info(f"Outlet {outlet.id} deleted from restaurant {restaurant.id}")


# ----------- Managers -----------

async def assign_manager(principal: Principal, outlet_id, manager_email: str) -> User:
    """
    Adds an existing manager account to the outlet. Accounts are created by
    the auth service, so an unknown email is a not-found.
    """
    owner = ensure_owner(principal, "Only owners can assign managers")
    outlet, _ = await ensure_outlet_access(owner, outlet_id, ManagerSource.STORE)

    manager = await User.get_or_none(email=manager_email.strip().lower(), role=UserRole.MANAGER)
    if not manager:
        raise NotFound("Manager account not found")

    if await outlet.managers.filter(id=manager.id).exists():
        raise ValidationFailed("Manager already assigned to this outlet")

    await outlet.managers.add(manager)
    log.info(f"Manager {manager.id} assigned to outlet {outlet.id}")
    return manager


async def remove_manager(principal: Principal, outlet_id, manager_id) -> None:
    owner = ensure_owner(principal, "Only owners can remove managers")
    outlet, _ = await ensure_outlet_access(owner, outlet_id, ManagerSource.STORE)

    manager = await User.get_or_none(id=as_uuid(manager_id, "Manager"))
    if manager:
        await outlet.managers.remove(manager)
        log.info(f"Manager {manager.id} removed from outlet {outlet.id}")


async def list_managers(outlet: Outlet) -> List[User]:
    return await outlet.managers.all().order_by("name")


# ----------- Accounts -----------

async def delete_account(principal: Authenticated) -> None:
    """
    Deletes the caller's account with everything it owns: restaurants, their
    outlets (and those outlets' categories, inventory and menus), and the cart.
    Orders are history and are kept.
    """
    user = await User.get_or_none(id=principal.user_id)
    if not user:
        raise NotFound("User not found")

    async with in_transaction():
        restaurant_ids = await Restaurant.filter(owner_id=user.id).values_list("id", flat=True)
        await _delete_outlets(await Outlet.filter(restaurant_id__in=list(restaurant_ids)))
        await Restaurant.filter(owner_id=user.id).delete()
        await user.managed_outlets.clear()
        await Cart.filter(user_id=user.id).delete()
        await user.delete()
    log.info(f"Account {principal.user_id} deleted with {len(restaurant_ids)} restaurants")
