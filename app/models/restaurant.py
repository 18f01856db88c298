from tortoise import fields, models
import uuid

from app.core.config import DEFAULT_OUTLET_LIMIT


class Restaurant(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    owner = fields.ForeignKeyField("models.User", related_name="owned_restaurants", on_delete=fields.CASCADE)
    # Maximum number of outlets, enforced when an outlet is created
    outlet_count = fields.IntField(default=DEFAULT_OUTLET_LIMIT)
    image = fields.CharField(max_length=1024, null=True)
    profile_photo_url = fields.CharField(max_length=1024, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "restaurants"
        indexes = [
            ("owner_id",),  # Owner dashboards
        ]


class Outlet(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    restaurant = fields.ForeignKeyField("models.Restaurant", related_name="outlets", on_delete=fields.CASCADE)
    managers = fields.ManyToManyField(
        "models.User", related_name="managed_outlets", through="outlet_managers"
    )
    location = fields.CharField(max_length=255, null=True)

    # Denormalized address and coordinates for map display and distance sorting
    street = fields.CharField(max_length=255, null=True)
    city = fields.CharField(max_length=128, null=True)
    state = fields.CharField(max_length=128, null=True)
    pincode = fields.CharField(max_length=32, null=True)
    country = fields.CharField(max_length=128, default="India")
    full_address = fields.CharField(max_length=1024, null=True)
    latitude = fields.FloatField(null=True)
    longitude = fields.FloatField(null=True)

    image = fields.CharField(max_length=1024, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "outlets"
        indexes = [
            ("restaurant_id",),
        ]
