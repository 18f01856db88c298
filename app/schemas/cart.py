from datetime import datetime
from pydantic import Field
from typing import List, Optional
import uuid

from app.schemas.response import CamelModel


class CartItem(CamelModel):
    item_id: str
    item_name: str
    item_price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    item_photo: Optional[str] = None
    outlet_id: str


class CartItemUpdate(CamelModel):
    item_id: str
    # Zero or less removes the line
    quantity: int


class CartSyncRequest(CamelModel):
    items: List[CartItem] = Field(default_factory=list)


class CartOut(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    items: List[CartItem]
    updated_at: datetime
