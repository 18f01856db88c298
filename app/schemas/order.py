from datetime import datetime
from pydantic import EmailStr, Field
from typing import List, Optional
import uuid

from app.models.order import OrderStatus, PaymentMethod, PaymentStatus, OrderType
from app.schemas.response import CamelModel


# ----------- Requests -----------
# Enum-typed fields are plain strings here; the lifecycle functions validate
# them so a bad value is a 400 with a readable message, not a schema error.

class OrderLineItemRequest(CamelModel):
    """Cart line as submitted by the client, tagged with its outlet."""
    item_id: str
    item_name: str
    item_price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    item_photo: Optional[str] = None
    outlet_id: Optional[str] = None


class CustomerInfoRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


class OrderCreateRequest(CamelModel):
    """Schema for the full order placement request body."""
    items: List[OrderLineItemRequest] = Field(default_factory=list)
    total_price: Optional[float] = None
    delivery_address: Optional[str] = None
    payment_method: Optional[str] = None
    order_type: Optional[str] = None
    customer_info: Optional[CustomerInfoRequest] = None


class OrderStatusUpdate(CamelModel):
    status: str


class PaymentStatusUpdate(CamelModel):
    payment_status: str


# ----------- Responses -----------

class OrderLineItem(CamelModel):
    item_id: str
    item_name: str
    item_price: float
    quantity: int
    item_photo: Optional[str] = None


class CustomerInfo(CamelModel):
    name: str
    email: str
    phone: str


class OutletRef(CamelModel):
    id: uuid.UUID
    name: str
    location: Optional[str] = None


class RestaurantRef(CamelModel):
    id: uuid.UUID
    name: str


class UserRef(CamelModel):
    id: uuid.UUID
    name: str
    email: str


class OrderOut(CamelModel):
    """Order populated with outlet/restaurant/customer display fields."""
    id: uuid.UUID
    order_number: str
    user_id: Optional[uuid.UUID] = None
    user: Optional[UserRef] = None
    customer_info: Optional[CustomerInfo] = None
    outlet_id: uuid.UUID
    outlet: Optional[OutletRef] = None
    restaurant_id: uuid.UUID
    restaurant: Optional[RestaurantRef] = None
    items: List[OrderLineItem]
    total_price: float
    delivery_address: str
    payment_method: PaymentMethod
    order_type: OrderType
    status: OrderStatus
    payment_status: PaymentStatus
    version: int
    created_at: datetime
    updated_at: datetime


class OrderSyncResponse(CamelModel):
    orders: List[OrderOut]
    synced_at: datetime


class OrderVerifyResponse(CamelModel):
    id: uuid.UUID = Field(serialization_alias="_id")
    order_number: str
    payment_status: PaymentStatus
    status: OrderStatus
    total_price: float
