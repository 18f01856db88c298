from datetime import datetime
from pydantic import Field
from typing import Optional
import uuid

from app.models.catalog import StockUnit
from app.schemas.response import CamelModel


class CategoryRequest(CamelModel):
    outlet_id: uuid.UUID
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    sort_order: int = 0


class CategoryUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryOut(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    outlet_id: uuid.UUID
    is_active: bool
    sort_order: int


class InventoryFields(CamelModel):
    category: Optional[str] = None
    current_stock: Optional[float] = Field(None, ge=0)
    min_stock: Optional[float] = Field(None, ge=0)
    unit: Optional[StockUnit] = None
    cost_per_unit: Optional[float] = Field(None, ge=0)
    supplier: Optional[str] = None
    last_restocked: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    notes: Optional[str] = None


class InventoryItemRequest(InventoryFields):
    outlet_id: uuid.UUID
    item_name: str = Field(..., min_length=1, description="Name of the stock item.")


class InventoryUpdateRequest(InventoryFields):
    # The owning outlet is not updatable
    item_name: Optional[str] = Field(None, min_length=1)


class InventoryOut(CamelModel):
    id: uuid.UUID
    item_name: str
    category: str
    current_stock: float
    min_stock: float
    unit: StockUnit
    cost_per_unit: float
    supplier: str
    last_restocked: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    notes: str
    outlet_id: uuid.UUID
    updated_at: datetime
