from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.security import Authenticated, require_principal
from app.schemas.menu import (
    MenuItemOut,
    MenuItemPhotoUpdate,
    MenuItemRequest,
    MenuItemUpdateRequest,
    OutletMenuOut,
)
from app.schemas.outlet import OutletSummary
from app.schemas.response import SuccessResponse
from app.services import menu_service

router = APIRouter()


def _item_wire(item) -> dict:
    return MenuItemOut.model_validate(item).to_wire()


# Fixed paths first so they are not captured by /{item_id}

@router.get("/view/{restaurant_name}/{outlet_name}", response_model=SuccessResponse)
async def view_outlet_menu_endpoint(restaurant_name: str, outlet_name: str):
    """Public menu page for customers."""
    outlet, items = await menu_service.view_outlet_menu(restaurant_name, outlet_name)
    menu = OutletMenuOut(
        outlet=OutletSummary.model_validate(outlet),
        items=[MenuItemOut.model_validate(i) for i in items],
    )
    return SuccessResponse(data=menu.to_wire())


@router.get("/outlet/{outlet_id}", response_model=SuccessResponse)
async def list_outlet_menu_endpoint(outlet_id: str, principal: Authenticated = Depends(require_principal)):
    items = await menu_service.list_outlet_menu(principal, outlet_id)
    return SuccessResponse(data=[_item_wire(i) for i in items])


@router.get("/sync", response_model=SuccessResponse)
async def sync_vendor_menu_endpoint(
    since: Optional[datetime] = Query(default=None, description="ISO 8601 checkpoint from the previous sync"),
    principal: Authenticated = Depends(require_principal),
):
    result = await menu_service.sync_vendor_menu(principal, since)
    return SuccessResponse(data=result.to_wire())


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_menu_item_endpoint(payload: MenuItemRequest, principal: Authenticated = Depends(require_principal)):
    data = payload.model_dump(exclude={"outlet_id"})
    item = await menu_service.create_menu_item(principal, payload.outlet_id, data)
    return SuccessResponse(message="Menu item created successfully", data=_item_wire(item))


@router.put("/{item_id}", response_model=SuccessResponse)
async def update_menu_item_endpoint(
    item_id: str,
    payload: MenuItemUpdateRequest,
    principal: Authenticated = Depends(require_principal),
):
    item = await menu_service.update_menu_item(principal, item_id, payload.model_dump(exclude_unset=True))
    return SuccessResponse(message="Menu item updated successfully", data=_item_wire(item))


@router.put("/{item_id}/photo", response_model=SuccessResponse)
async def update_menu_item_photo_endpoint(
    item_id: str,
    payload: MenuItemPhotoUpdate,
    principal: Authenticated = Depends(require_principal),
):
    """Records the photo URL after the client has uploaded the file."""
    item = await menu_service.update_menu_item_photo(principal, item_id, payload.file_url)
    return SuccessResponse(message="Item photo updated successfully", data=_item_wire(item))


@router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_menu_item_endpoint(item_id: str, principal: Authenticated = Depends(require_principal)):
    await menu_service.delete_menu_item(principal, item_id)
    return SuccessResponse(message="Menu item deleted successfully")


@router.get("/{item_id}", response_model=SuccessResponse)
async def get_menu_item_endpoint(item_id: str):
    item = await menu_service.get_menu_item(item_id)
    return SuccessResponse(data=_item_wire(item))
