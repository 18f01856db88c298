from types import SimpleNamespace

import pytest
import pytest_asyncio

from app.core.db import init_db, close_db
from app.core.security import Customer, Manager, Owner
from app.models.restaurant import Outlet, Restaurant
from app.models.user import User, UserRole
from app.testing.testing_mocks import RecordingNotifier


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    await init_db(db_url="sqlite://:memory:")
    yield
    await close_db()


@pytest.fixture
def notifier():
    return RecordingNotifier()


def owner_principal(user: User, *restaurants: Restaurant) -> Owner:
    return Owner(str(user.id), user.email, frozenset(str(r.id) for r in restaurants))


def manager_principal(user: User, *outlets: Outlet) -> Manager:
    return Manager(str(user.id), user.email, frozenset(str(o.id) for o in outlets))


def customer_principal(user: User) -> Customer:
    return Customer(str(user.id), user.email)


def line(outlet_id, item_id: str = "item-1", price: float = 120.0, quantity: int = 1, name: str = "Paneer Wrap"):
    """A cart line as the client submits it."""
    return {
        "itemId": item_id,
        "itemName": name,
        "itemPrice": price,
        "quantity": quantity,
        "itemPhoto": None,
        "outletId": str(outlet_id),
    }


@pytest_asyncio.fixture
async def world(db):
    """
    One owner with a restaurant and two outlets. `manager` is assigned to
    `outlet`; `stranger` is a manager of nothing; `customer` is a plain user.
    """
    owner_user = await User.create(name="Olivia Owner", email="owner@example.com", role=UserRole.OWNER)
    manager_user = await User.create(name="Manu Manager", email="manager@example.com", role=UserRole.MANAGER)
    stranger_user = await User.create(name="Sam Stranger", email="stranger@example.com", role=UserRole.MANAGER)
    customer_user = await User.create(name="Cleo Customer", email="cleo@example.com", role=UserRole.USER)
    other_owner_user = await User.create(name="Otto Other", email="otto@example.com", role=UserRole.OWNER)

    restaurant = await Restaurant.create(name="Spice Route", owner=owner_user)
    outlet = await Outlet.create(name="Spice Route - MG Road", restaurant=restaurant, location="MG Road")
    second_outlet = await Outlet.create(name="Spice Route - Indiranagar", restaurant=restaurant)
    await outlet.managers.add(manager_user)

    return SimpleNamespace(
        restaurant=restaurant,
        outlet=outlet,
        second_outlet=second_outlet,
        owner_user=owner_user,
        manager_user=manager_user,
        customer_user=customer_user,
        owner=owner_principal(owner_user, restaurant),
        manager=manager_principal(manager_user, outlet),
        stranger=manager_principal(stranger_user),
        customer=customer_principal(customer_user),
        other_owner=owner_principal(other_owner_user),
    )
