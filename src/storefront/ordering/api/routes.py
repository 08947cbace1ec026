"""FastAPI endpoints for orders."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.identity.guards import admin_user, current_user, optional_user
from storefront.identity.user import User
from storefront.ordering.api.schemas import (
    CancelOrderRequest,
    CreateOrderRequest,
    OrderPageResponse,
    OrderResponse,
    OrderStatsResponse,
    PayOrderRequest,
    UpdateStatusRequest,
)
from storefront.ordering.cancellation import CancelOrder
from storefront.ordering.fulfillment import MarkOrderDelivered, MarkOrderPaid, UpdateOrderStatus
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.stats import order_stats
from storefront.shared.errors import AuthenticationError, PermissionDeniedError


def _can_act_on(order: Order, user: User | None, guest_email: str | None) -> bool:
    if user is not None and (user.is_admin or order.is_owned_by(user.id)):
        return True
    return order.belongs_to_guest(guest_email)


def _ensure_access(order: Order, user: User | None, guest_email: str | None = None) -> None:
    if _can_act_on(order, user, guest_email):
        return
    if user is None and order.user_id:
        raise AuthenticationError("Not authorized, no token")
    raise PermissionDeniedError("Not authorized to access this order")


def _load(order_id: str) -> Order:
    return current_domain.repository_for(Order).get(order_id)


order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, user: User | None = Depends(optional_user)) -> OrderResponse:
    command = PlaceOrder(
        user_id=user.id if user else None,
        items=json.dumps([line.model_dump() for line in body.order_items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
        guest_user=json.dumps(body.guest_user.model_dump()) if body.guest_user and user is None else None,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(_load(order_id))


@order_router.get("", response_model=OrderPageResponse)
async def list_orders(
    page: int = Query(1, ge=1),
    status: str | None = None,
    _admin: User = Depends(admin_user),
) -> OrderPageResponse:
    result = current_domain.repository_for(Order).page(page=page, status=status)
    return OrderPageResponse(
        orders=[OrderResponse.from_order(o) for o in result.orders],
        page=result.page,
        pages=result.pages,
        total=result.total,
    )


@order_router.get("/myorders", response_model=list[OrderResponse])
async def my_orders(user: User = Depends(current_user)) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in current_domain.repository_for(Order).for_user(user.id)]


@order_router.get("/guest/{email}", response_model=list[OrderResponse])
async def guest_orders(email: str) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in current_domain.repository_for(Order).for_guest_email(email)]


@order_router.get("/stats", response_model=OrderStatsResponse)
async def stats(_admin: User = Depends(admin_user)) -> OrderStatsResponse:
    figures = order_stats()
    figures["recent_orders"] = [OrderResponse.from_order(o) for o in figures["recent_orders"]]
    return OrderStatsResponse(**figures)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    guest_email: str | None = Query(None, alias="email"),
    user: User | None = Depends(optional_user),
) -> OrderResponse:
    order = _load(order_id)
    _ensure_access(order, user, guest_email)
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/pay", response_model=OrderResponse)
async def pay_order(order_id: str, body: PayOrderRequest, user: User = Depends(current_user)) -> OrderResponse:
    _ensure_access(_load(order_id), user)
    command = MarkOrderPaid(
        order_id=order_id,
        payment_id=body.id,
        payment_status=body.status,
        update_time=body.update_time,
        email_address=body.email_address,
    )
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(_load(order_id))


@order_router.put("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(order_id: str, _admin: User = Depends(admin_user)) -> OrderResponse:
    current_domain.process(MarkOrderDelivered(order_id=order_id), asynchronous=False)
    return OrderResponse.from_order(_load(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    _admin: User = Depends(admin_user),
) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(_load(order_id))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    user: User | None = Depends(optional_user),
) -> OrderResponse:
    _ensure_access(_load(order_id), user, body.guest_email)
    current_domain.process(CancelOrder(order_id=order_id, reason=body.reason), asynchronous=False)
    return OrderResponse.from_order(_load(order_id))
