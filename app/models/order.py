from enum import Enum
from tortoise import fields, models
import uuid


class OrderStatus(str, Enum):
    PENDING = "pending"  # Placed, waiting for payment / vendor confirmation
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# No transition leaves these states
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    WALLET = "wallet"


class OrderType(str, Enum):
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"
    DELIVERY = "delivery"


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order_number = fields.CharField(max_length=64, unique=True)

    # Attribution: exactly one of user_id / customer_info is set
    user_id = fields.UUIDField(null=True)
    customer_info = fields.JSONField(null=True)  # {name, email, phone} for guest orders

    # Placement references are copied at creation and never rewritten, so
    # they outlive deletion of the outlet or account they point at.
    outlet_id = fields.UUIDField()
    restaurant_id = fields.UUIDField()

    # Frozen line item snapshots: {itemId, itemName, itemPrice, quantity, itemPhoto}
    items = fields.JSONField(default=list)
    total_price = fields.DecimalField(max_digits=14, decimal_places=2)
    delivery_address = fields.TextField(default="")
    payment_method = fields.CharEnumField(PaymentMethod)
    order_type = fields.CharEnumField(OrderType)

    status = fields.CharEnumField(OrderStatus, default=OrderStatus.PENDING)
    payment_status = fields.CharEnumField(PaymentStatus, default=PaymentStatus.PENDING)

    # Optimistic concurrency token, bumped on every status/payment write
    version = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("outlet_id", "payment_status"),  # Vendor operational views
            ("user_id",),                     # User order history
            ("created_at",),                  # Time-based queries
            ("updated_at",),                  # Sync checkpoints
        ]
