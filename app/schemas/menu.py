from datetime import datetime
from pydantic import Field
from typing import List, Optional
import uuid

from app.schemas.outlet import OutletSummary
from app.schemas.response import CamelModel


class MenuItemFields(CamelModel):
    item_quantity: Optional[int] = Field(None, ge=0)
    item_photo: Optional[str] = None
    item_description: Optional[str] = None
    category: Optional[str] = None
    is_available: Optional[bool] = None


class MenuItemRequest(MenuItemFields):
    outlet_id: uuid.UUID
    item_name: str = Field(..., min_length=1)
    item_price: float = Field(..., ge=0)


class MenuItemUpdateRequest(MenuItemFields):
    # The owning outlet is not updatable
    item_name: Optional[str] = Field(None, min_length=1)
    item_price: Optional[float] = Field(None, ge=0)


class MenuItemPhotoUpdate(CamelModel):
    file_url: str = Field(..., min_length=1, description="Public URL of the uploaded photo.")


class MenuItemOut(CamelModel):
    id: uuid.UUID
    item_name: str
    item_price: float
    item_quantity: int
    item_photo: Optional[str] = None
    item_description: Optional[str] = None
    category: Optional[str] = None
    is_available: bool
    outlet_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class OutletMenuOut(CamelModel):
    """Public menu page: the outlet and everything it lists."""
    outlet: OutletSummary
    items: List[MenuItemOut]


class MenuSyncResponse(CamelModel):
    items: List[MenuItemOut]
    synced_at: datetime
