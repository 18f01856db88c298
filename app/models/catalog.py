from enum import Enum
from tortoise import fields, models
import uuid


class StockUnit(str, Enum):
    PIECES = "pieces"
    KG = "kg"
    GRAMS = "grams"
    LITERS = "liters"
    ML = "ml"
    PACKETS = "packets"
    BOXES = "boxes"


class Category(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    outlet = fields.ForeignKeyField("models.Outlet", related_name="categories", on_delete=fields.CASCADE)
    is_active = fields.BooleanField(default=True)
    sort_order = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "categories"
        # Category names are unique per outlet
        unique_together = (("name", "outlet"),)


class InventoryItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    item_name = fields.CharField(max_length=255)
    category = fields.CharField(max_length=128, default="Other")
    current_stock = fields.FloatField(default=0)
    min_stock = fields.FloatField(default=0)
    unit = fields.CharEnumField(StockUnit, default=StockUnit.PIECES)
    cost_per_unit = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    supplier = fields.CharField(max_length=255, default="")
    last_restocked = fields.DatetimeField(null=True)
    expiry_date = fields.DatetimeField(null=True)
    notes = fields.TextField(default="")
    outlet = fields.ForeignKeyField("models.Outlet", related_name="inventory", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "inventory"
        indexes = [
            ("outlet_id", "item_name"),
            ("outlet_id", "category"),
        ]


class MenuItem(models.Model):
    """A dish an outlet sells. Cart and order lines snapshot these fields."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    item_name = fields.CharField(max_length=255)
    item_price = fields.DecimalField(max_digits=12, decimal_places=2)
    item_quantity = fields.IntField(default=0)
    item_photo = fields.CharField(max_length=1024, null=True)
    item_description = fields.TextField(null=True)
    category = fields.CharField(max_length=128, null=True)  # Category name, e.g. "Beverages"
    is_available = fields.BooleanField(default=True)
    outlet = fields.ForeignKeyField("models.Outlet", related_name="menu_items", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("outlet_id", "category", "item_name"),  # Menu listing order
            ("updated_at",),                          # Vendor menu sync
        ]
