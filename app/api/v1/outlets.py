import logging

from fastapi import APIRouter, Depends, status

from app.core.security import Authenticated, require_principal
from app.schemas.outlet import (
    AccountOut,
    ManagerAssignRequest,
    OutletCreateRequest,
    OutletOut,
    OutletUpdateRequest,
    RestaurantDetailOut,
    RestaurantOut,
    RestaurantRequest,
    RestaurantUpdateRequest,
)
from app.schemas.response import SuccessResponse
from app.services import outlet_service

log = logging.getLogger("uvicorn")

restaurant_router = APIRouter()
router = APIRouter()


# ----------- Restaurants -----------

@restaurant_router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_restaurant_endpoint(payload: RestaurantRequest, principal: Authenticated = Depends(require_principal)):
    restaurant = await outlet_service.create_restaurant(principal, payload.model_dump())
    log.info(f"Restaurant {restaurant.id} created.")
    return SuccessResponse(
        message=f"Restaurant '{restaurant.name}' created successfully.",
        data=RestaurantOut.model_validate(restaurant).to_wire(),
    )


@restaurant_router.get("/all", response_model=SuccessResponse)
async def list_all_restaurants_endpoint():
    """Public restaurant directory."""
    restaurants = await outlet_service.list_all_restaurants()
    return SuccessResponse(data=[RestaurantDetailOut.from_restaurant(r).to_wire() for r in restaurants])


@restaurant_router.get("/mine", response_model=SuccessResponse)
async def list_my_restaurants_endpoint(principal: Authenticated = Depends(require_principal)):
    restaurants = await outlet_service.list_my_restaurants(principal)
    return SuccessResponse(data=[RestaurantDetailOut.from_restaurant(r).to_wire() for r in restaurants])


@restaurant_router.get("/name/{restaurant_name}", response_model=SuccessResponse)
async def get_restaurant_by_name_endpoint(restaurant_name: str):
    restaurant = await outlet_service.get_restaurant_by_name(restaurant_name)
    return SuccessResponse(data=RestaurantDetailOut.from_restaurant(restaurant, include_owner=True).to_wire())


@restaurant_router.get("/{restaurant_id}", response_model=SuccessResponse)
async def get_restaurant_endpoint(restaurant_id: str):
    restaurant = await outlet_service.get_restaurant(restaurant_id)
    return SuccessResponse(data=RestaurantDetailOut.from_restaurant(restaurant, include_owner=True).to_wire())


@restaurant_router.put("/{restaurant_id}", response_model=SuccessResponse)
async def update_restaurant_endpoint(
    restaurant_id: str,
    payload: RestaurantUpdateRequest,
    principal: Authenticated = Depends(require_principal),
):
    restaurant = await outlet_service.update_restaurant(principal, restaurant_id, payload.model_dump(exclude_unset=True))
    return SuccessResponse(message="Restaurant updated successfully", data=RestaurantOut.model_validate(restaurant).to_wire())


@restaurant_router.delete("/{restaurant_id}", response_model=SuccessResponse)
async def delete_restaurant_endpoint(restaurant_id: str, principal: Authenticated = Depends(require_principal)):
    """Deletes the restaurant with its outlets. Owner only."""
    await outlet_service.delete_restaurant(principal, restaurant_id)
    return SuccessResponse(message="Restaurant deleted successfully")


# ----------- Outlets -----------

@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_outlet_endpoint(payload: OutletCreateRequest, principal: Authenticated = Depends(require_principal)):
    """Creates an outlet. Owner of the restaurant only, within its outlet limit."""
    data = payload.model_dump(exclude={"restaurant_id"})
    outlet = await outlet_service.create_outlet(principal, payload.restaurant_id, data)
    return SuccessResponse(message="Outlet created successfully", data=OutletOut.model_validate(outlet).to_wire())


@router.get("/restaurant/{restaurant_id}", response_model=SuccessResponse)
async def list_outlets_endpoint(restaurant_id: str):
    outlets = await outlet_service.list_outlets(restaurant_id)
    return SuccessResponse(data=[OutletOut.model_validate(o).to_wire() for o in outlets])


@router.get("/{outlet_id}", response_model=SuccessResponse)
async def get_outlet_endpoint(outlet_id: str):
    outlet = await outlet_service.get_outlet(outlet_id)
    return SuccessResponse(data=OutletOut.model_validate(outlet).to_wire())


@router.put("/{outlet_id}", response_model=SuccessResponse)
async def update_outlet_endpoint(
    outlet_id: str,
    payload: OutletUpdateRequest,
    principal: Authenticated = Depends(require_principal),
):
    outlet = await outlet_service.update_outlet(principal, outlet_id, payload.model_dump(exclude_unset=True))
    return SuccessResponse(message="Outlet updated successfully", data=OutletOut.model_validate(outlet).to_wire())


@router.delete("/{outlet_id}", response_model=SuccessResponse)
async def delete_outlet_endpoint(outlet_id: str, principal: Authenticated = Depends(require_principal)):
    await outlet_service.delete_outlet(principal, outlet_id)
    return SuccessResponse(message="Outlet deleted successfully")


# ----------- Managers -----------

@router.get("/{outlet_id}/managers", response_model=SuccessResponse)
async def list_managers_endpoint(outlet_id: str):
    outlet = await outlet_service.get_outlet(outlet_id)
    managers = await outlet_service.list_managers(outlet)
    return SuccessResponse(data=[AccountOut.model_validate(m).to_wire() for m in managers])


@router.post("/{outlet_id}/managers", response_model=SuccessResponse)
async def assign_manager_endpoint(
    outlet_id: str,
    payload: ManagerAssignRequest,
    principal: Authenticated = Depends(require_principal),
):
    manager = await outlet_service.assign_manager(principal, outlet_id, payload.manager_email)
    return SuccessResponse(message="Manager assigned successfully", data=AccountOut.model_validate(manager).to_wire())


@router.delete("/{outlet_id}/managers/{manager_id}", response_model=SuccessResponse)
async def remove_manager_endpoint(outlet_id: str, manager_id: str, principal: Authenticated = Depends(require_principal)):
    await outlet_service.remove_manager(principal, outlet_id, manager_id)
    return SuccessResponse(message="Manager removed successfully")
