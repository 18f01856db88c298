import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_notifier
from app.core.security import Authenticated, Principal, get_principal, require_principal, require_service_key
from app.realtime.notifier import Notifier
from app.schemas.order import OrderCreateRequest, OrderStatusUpdate, PaymentStatusUpdate
from app.schemas.response import SuccessResponse
from app.services import order_service

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(
    request_data: OrderCreateRequest,
    principal: Principal = Depends(get_principal),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Places an order from the submitted cart. The bearer token is optional:
    without it the order is a guest order and customerInfo is required.
    """
    items_data = [item.model_dump(by_alias=True) for item in request_data.items]
    customer_info = request_data.customer_info.model_dump() if request_data.customer_info else None

    order = await order_service.create_order(
        principal=principal,
        items=items_data,
        total_price=request_data.total_price,
        delivery_address=request_data.delivery_address,
        payment_method=request_data.payment_method,
        order_type=request_data.order_type,
        customer_info=customer_info,
        notifier=notifier,
    )
    log.info(f"Order {order.order_number} created successfully.")
    return SuccessResponse(message="Order created successfully", data=order.to_wire())


@router.get("/user", response_model=SuccessResponse)
async def get_user_orders_endpoint(principal: Authenticated = Depends(require_principal)):
    """Orders placed by the caller, newest first."""
    orders = await order_service.get_user_orders(principal)
    return SuccessResponse(data=[o.to_wire() for o in orders])


@router.get("/outlet/{outlet_id}", response_model=SuccessResponse)
async def get_outlet_orders_endpoint(
    outlet_id: str,
    order_type: Optional[str] = Query(default=None, alias="orderType"),
    principal: Authenticated = Depends(require_principal),
):
    """Paid orders for an outlet. Owner or assigned manager only."""
    orders = await order_service.get_outlet_orders(outlet_id, principal, order_type)
    return SuccessResponse(data=[o.to_wire() for o in orders])


@router.get("/sync", response_model=SuccessResponse)
async def sync_vendor_orders_endpoint(
    since: Optional[datetime] = Query(default=None, description="ISO 8601 checkpoint from the previous sync"),
    principal: Authenticated = Depends(require_principal),
):
    """Reconciliation path for vendor clients that missed socket events."""
    result = await order_service.sync_vendor_orders(principal, since)
    return SuccessResponse(data=result.to_wire())


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: str, principal: Authenticated = Depends(require_principal)):
    order = await order_service.get_order(order_id, principal)
    return SuccessResponse(data=order.to_wire())


@router.put("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(
    order_id: str,
    payload: OrderStatusUpdate,
    principal: Authenticated = Depends(require_principal),
    notifier: Notifier = Depends(get_notifier),
):
    """Updates status (e.g. 'confirmed', 'preparing', 'ready', 'delivered')."""
    order = await order_service.update_order_status(order_id, principal, payload.status, notifier)
    return SuccessResponse(message="Order status updated", data=order.to_wire())


@router.put("/{order_id}/payment", response_model=SuccessResponse, dependencies=[Depends(require_service_key)])
async def update_payment_endpoint(
    order_id: str,
    payload: PaymentStatusUpdate,
    notifier: Notifier = Depends(get_notifier),
):
    """Payment webhook. Requires the X-Service-Key credential."""
    order = await order_service.update_payment_status(order_id, payload.payment_status, notifier)
    return SuccessResponse(message="Payment status updated", data=order.to_wire())


@router.get("/{order_id}/verify", response_model=SuccessResponse)
async def verify_payment_endpoint(order_id: str):
    """Public payment check: id, number, payment status, status and total."""
    result = await order_service.verify_payment(order_id)
    return SuccessResponse(data=result.to_wire())
