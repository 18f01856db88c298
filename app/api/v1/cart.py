from fastapi import APIRouter, Depends

from app.core.security import Authenticated, require_principal
from app.schemas.cart import CartItem, CartItemUpdate, CartOut, CartSyncRequest
from app.schemas.response import SuccessResponse
from app.services import cart_service

router = APIRouter()


def _cart_response(cart, message: str = None) -> SuccessResponse:
    return SuccessResponse(message=message, data=CartOut.model_validate(cart).to_wire())


@router.get("/", response_model=SuccessResponse)
async def get_cart_endpoint(principal: Authenticated = Depends(require_principal)):
    return _cart_response(await cart_service.get_cart(principal))


@router.post("/add", response_model=SuccessResponse)
async def add_to_cart_endpoint(item: CartItem, principal: Authenticated = Depends(require_principal)):
    return _cart_response(await cart_service.add_item(principal, item.model_dump(by_alias=True)))


@router.put("/update", response_model=SuccessResponse)
async def update_cart_item_endpoint(payload: CartItemUpdate, principal: Authenticated = Depends(require_principal)):
    return _cart_response(await cart_service.update_item(principal, payload.item_id, payload.quantity))


@router.put("/sync", response_model=SuccessResponse)
async def sync_cart_endpoint(payload: CartSyncRequest, principal: Authenticated = Depends(require_principal)):
    """Replaces the whole cart with the client's copy."""
    items = [item.model_dump(by_alias=True) for item in payload.items]
    return _cart_response(await cart_service.sync_cart(principal, items))


@router.delete("/remove/{item_id}", response_model=SuccessResponse)
async def remove_from_cart_endpoint(item_id: str, principal: Authenticated = Depends(require_principal)):
    return _cart_response(await cart_service.remove_item(principal, item_id))


@router.delete("/clear", response_model=SuccessResponse)
async def clear_cart_endpoint(principal: Authenticated = Depends(require_principal)):
    await cart_service.clear_cart(principal.user_id)
    return SuccessResponse(message="Cart cleared")
