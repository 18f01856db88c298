# scripts/seed_data.py
import asyncio
from app.core.db import init_db, close_db
from app.core.security import create_access_token
from app.models.user import User, UserRole
from app.models.restaurant import Restaurant, Outlet
from app.models.catalog import Category, InventoryItem


async def seed():
    owner, _ = await User.get_or_create(email="owner@smartfeast.dev", role=UserRole.OWNER, defaults={"name": "Demo Owner"})
    manager, _ = await User.get_or_create(email="manager@smartfeast.dev", role=UserRole.MANAGER, defaults={"name": "Demo Manager"})
    customer, _ = await User.get_or_create(email="customer@smartfeast.dev", role=UserRole.USER, defaults={"name": "Demo Customer"})

    rest, _ = await Restaurant.get_or_create(name="Demo Restaurant", owner=owner)
    outlet, _ = await Outlet.get_or_create(
        name="Demo Outlet - MG Road", restaurant=rest,
        defaults={"location": "MG Road", "city": "Bengaluru", "latitude": 12.9756, "longitude": 77.6050},
    )
    if not await outlet.managers.filter(id=manager.id).exists():
        await outlet.managers.add(manager)
    print("Restaurant:", rest.id, "Outlet:", outlet.id)

    # Categories and stock (idempotent)
    for order_, name in enumerate(["Wraps", "Rice Bowls", "Beverages"]):
        await Category.get_or_create(name=name, outlet=outlet, defaults={"sort_order": order_})
    for name, stock in [("Paneer", 20), ("Basmati Rice", 50), ("Cold Drink", 100)]:
        item, _ = await InventoryItem.get_or_create(item_name=name, outlet=outlet, defaults={"current_stock": stock})
        item.current_stock = stock
        await item.save()

    print("Owner token:", create_access_token({
        "userId": str(owner.id), "email": owner.email, "role": "owner", "ownedRestaurants": [str(rest.id)],
    }))
    print("Manager token:", create_access_token({
        "userId": str(manager.id), "email": manager.email, "role": "manager", "managedOutlets": [str(outlet.id)],
    }))
    print("Customer token:", create_access_token({
        "userId": str(customer.id), "email": customer.email, "role": "user",
    }))


async def main():
    await init_db()
    await seed()
    await close_db()

if __name__ == "__main__":
    asyncio.run(main())
