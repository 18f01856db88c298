from tortoise import fields, models
import uuid


class Cart(models.Model):
    """
    One cart per user. Items are snapshots:
    {itemId, itemName, itemPrice, quantity, itemPhoto, outletId}
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user = fields.OneToOneField("models.User", related_name="cart", on_delete=fields.CASCADE)
    items = fields.JSONField(default=list)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "carts"
