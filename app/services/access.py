"""
Access control for outlet-scoped resources.

A caller may act on an outlet iff it owns the parent restaurant (owner role)
or is assigned to the outlet (manager role). The manager assignment can come
from the token snapshot or be re-read from the store; callers pick the source.
Anything that writes uses the store, so an unassigned manager loses write
access immediately even while their token still lists the outlet.
"""
from enum import Enum
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from app.core.errors import AccessDenied, AuthenticationFailed, NotFound
from app.core.security import Customer, Guest, Manager, Owner, Principal
from app.models.restaurant import Outlet, Restaurant


class ManagerSource(str, Enum):
    CLAIMS = "claims"
    STORE = "store"


def is_owner_of(principal: Principal, owner_id) -> bool:
    if isinstance(principal, Owner):
        return owner_id is not None and principal.user_id == str(owner_id)
    if isinstance(principal, (Manager, Customer, Guest)):
        return False
    raise TypeError(f"Unknown principal type: {type(principal).__name__}")


def is_manager_of(principal: Principal, outlet_id, managed_outlet_ids: Optional[Iterable] = None) -> bool:
    if isinstance(principal, Manager):
        if managed_outlet_ids is None:
            managed_outlet_ids = principal.managed_outlets
        return str(outlet_id) in {str(o) for o in managed_outlet_ids}
    if isinstance(principal, (Owner, Customer, Guest)):
        return False
    raise TypeError(f"Unknown principal type: {type(principal).__name__}")


def can_access(principal: Principal, owner_id, outlet_id, managed_outlet_ids: Optional[Iterable] = None) -> bool:
    return is_owner_of(principal, owner_id) or is_manager_of(principal, outlet_id, managed_outlet_ids)


async def managed_outlet_ids_from_store(principal: Principal) -> Tuple[str, ...]:
    """Current assignment list for a manager, read from the store."""
    if not isinstance(principal, Manager):
        return ()
    ids = await Outlet.filter(managers__id=principal.user_id).values_list("id", flat=True)
    return tuple(str(i) for i in ids)


async def ensure_outlet_access(
    principal: Principal,
    outlet_id,
    source: ManagerSource = ManagerSource.STORE,
) -> Tuple[Outlet, Restaurant]:
    """
    Resolves the outlet and its restaurant and checks the caller may act on it.

    Raises NotFound when the outlet does not exist and AccessDenied when the
    caller is neither its owner nor one of its managers.
    """
    if isinstance(principal, Guest):
        raise AuthenticationFailed("Token required")

    outlet = await Outlet.filter(id=as_uuid(outlet_id, "Outlet")).select_related("restaurant").first()
    if not outlet:
        raise NotFound("Outlet not found")
    restaurant = outlet.restaurant

    managed = None
    if source == ManagerSource.STORE and isinstance(principal, Manager):
        managed = await managed_outlet_ids_from_store(principal)

    if not can_access(principal, restaurant.owner_id, outlet.id, managed):
        raise AccessDenied("Access denied")
    return outlet, restaurant


def ensure_owner(principal: Principal, message: str = "Only owners can perform this action") -> Owner:
    if not isinstance(principal, Owner):
        raise AccessDenied(message)
    return principal


def as_uuid(value, what: str = "id") -> UUID:
    try:
        return value if isinstance(value, UUID) else UUID(str(value))
    except (TypeError, ValueError):
        raise NotFound(f"{what} not found")


async def accessible_outlet_ids(principal: Principal) -> List[str]:
    """Every outlet an owner's restaurants hold, or a manager's current assignments."""
    if isinstance(principal, Owner):
        restaurant_ids = await Restaurant.filter(owner_id=principal.user_id).values_list("id", flat=True)
        if not restaurant_ids:
            return []
        ids = await Outlet.filter(restaurant_id__in=list(restaurant_ids)).values_list("id", flat=True)
        return [str(i) for i in ids]
    if isinstance(principal, Manager):
        return list(await managed_outlet_ids_from_store(principal))
    if isinstance(principal, (Customer, Guest)):
        return []
    raise TypeError(f"Unknown principal type: {type(principal).__name__}")
