from enum import Enum
from tortoise import fields, models
import uuid


class UserRole(str, Enum):
    OWNER = "owner"
    MANAGER = "manager"
    USER = "user"  # customer


class User(models.Model):
    """
    One account per (email, role). The same person may hold a customer and an
    owner account under one email address.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255)
    # Produced by the external credential hasher; never read by this service.
    password_hash = fields.CharField(max_length=255, default="")
    role = fields.CharEnumField(UserRole)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "users"
        unique_together = (("email", "role"),)
        indexes = [
            ("email",),
        ]

    async def save(self, *args, **kwargs):
        self.email = self.email.strip().lower()
        await super().save(*args, **kwargs)
