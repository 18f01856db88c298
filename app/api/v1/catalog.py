from fastapi import APIRouter, Depends, status

from app.core.security import Authenticated, require_principal
from app.schemas.catalog import (
    CategoryOut,
    CategoryRequest,
    CategoryUpdateRequest,
    InventoryItemRequest,
    InventoryOut,
    InventoryUpdateRequest,
)
from app.schemas.response import SuccessResponse
from app.services import catalog_service

category_router = APIRouter()
inventory_router = APIRouter()


# ----------- Categories -----------

@category_router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_category_endpoint(payload: CategoryRequest, principal: Authenticated = Depends(require_principal)):
    data = payload.model_dump(exclude={"outlet_id"})
    category = await catalog_service.create_category(principal, payload.outlet_id, data)
    return SuccessResponse(message="Category created successfully", data=CategoryOut.model_validate(category).to_wire())


@category_router.get("/outlet/{outlet_id}", response_model=SuccessResponse)
async def list_categories_endpoint(outlet_id: str):
    categories = await catalog_service.list_categories(outlet_id)
    return SuccessResponse(data=[CategoryOut.model_validate(c).to_wire() for c in categories])


@category_router.put("/{category_id}", response_model=SuccessResponse)
async def update_category_endpoint(
    category_id: str,
    payload: CategoryUpdateRequest,
    principal: Authenticated = Depends(require_principal),
):
    category = await catalog_service.update_category(principal, category_id, payload.model_dump(exclude_unset=True))
    return SuccessResponse(message="Category updated successfully", data=CategoryOut.model_validate(category).to_wire())


@category_router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category_endpoint(category_id: str, principal: Authenticated = Depends(require_principal)):
    await catalog_service.delete_category(principal, category_id)
    return SuccessResponse(message="Category deleted successfully")


# ----------- Inventory -----------

@inventory_router.get("/outlet/{outlet_id}", response_model=SuccessResponse)
async def list_inventory_endpoint(outlet_id: str, principal: Authenticated = Depends(require_principal)):
    items = await catalog_service.list_inventory(principal, outlet_id)
    return SuccessResponse(data=[InventoryOut.model_validate(i).to_wire() for i in items])


@inventory_router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_inventory_item_endpoint(
    payload: InventoryItemRequest,
    principal: Authenticated = Depends(require_principal),
):
    data = payload.model_dump(exclude={"outlet_id"})
    item = await catalog_service.create_inventory_item(principal, payload.outlet_id, data)
    return SuccessResponse(message="Inventory item created successfully", data=InventoryOut.model_validate(item).to_wire())


@inventory_router.put("/{item_id}", response_model=SuccessResponse)
async def update_inventory_item_endpoint(
    item_id: str,
    payload: InventoryUpdateRequest,
    principal: Authenticated = Depends(require_principal),
):
    item = await catalog_service.update_inventory_item(principal, item_id, payload.model_dump(exclude_unset=True))
    return SuccessResponse(message="Inventory item updated successfully", data=InventoryOut.model_validate(item).to_wire())


@inventory_router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_inventory_item_endpoint(item_id: str, principal: Authenticated = Depends(require_principal)):
    await catalog_service.delete_inventory_item(principal, item_id)
    return SuccessResponse(message="Inventory item deleted successfully")
