# app/models/__init__.py
from .user import User, UserRole
from .restaurant import Restaurant, Outlet
from .catalog import Category, InventoryItem, MenuItem, StockUnit
from .cart import Cart
from .order import Order, OrderStatus, PaymentStatus, PaymentMethod, OrderType, TERMINAL_STATUSES

# Export all models
__all__ = [
    "User",
    "UserRole",
    "Restaurant",
    "Outlet",
    "Category",
    "InventoryItem",
    "MenuItem",
    "StockUnit",
    "Cart",
    "Order",
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethod",
    "OrderType",
    "TERMINAL_STATUSES",
]
