"""Order API routes: checkout, history and staff decisions."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from storefront.api.deps import CurrentAccount, StaffAccount
from storefront.schemas.order import (
    ApproveOrderRequest,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderListResponse,
    OrderResponse,
    OrderTransitionResponse,
)
from storefront.services.order_service import OrderService, get_order_service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "",
    response_model=OrderCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place a reservation order",
    description="Creates a pending order for in-store pickup. Stock is only reduced when staff approve it.",
)
async def create_order(
    data: OrderCreateRequest,
    account: CurrentAccount,
    order_service: OrderService = Depends(get_order_service),
) -> OrderCreateResponse:
    """Place a pending order from the customer's cart lines."""
    order = await order_service.create_order(account, data.items)
    return OrderCreateResponse(
        order=OrderResponse(**order),
        message="Order placed successfully! Please visit the store for pickup.",
    )


@router.get(
    "",
    response_model=OrderListResponse,
    summary="List orders",
    description="Customers see their own orders; staff see every order.",
)
async def list_orders(
    account: CurrentAccount,
    order_service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    orders = await order_service.list_orders(account)
    return OrderListResponse(items=[OrderResponse(**order) for order in orders])


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
)
async def get_order(
    order_id: UUID,
    account: CurrentAccount,
    order_service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = await order_service.get_order(account, order_id)
    return OrderResponse(**order)


@router.post(
    "/{order_id}/approve",
    response_model=OrderTransitionResponse,
    summary="Approve a pending order",
    description="Reduces stock for every line and credits the owner's VIP progress.",
)
async def approve_order(
    order_id: UUID,
    actor: StaffAccount,
    data: ApproveOrderRequest | None = None,
    order_service: OrderService = Depends(get_order_service),
) -> OrderTransitionResponse:
    """Approve an order.

    ``vip_milestone_reached`` tells staff to hand out the VIP reward;
    the reward itself is recorded manually in the note.
    """
    result = await order_service.approve_order(actor, order_id, note=data.note if data else None)
    return OrderTransitionResponse(
        order=OrderResponse(**result.order),
        message="Order approved successfully",
        vip_approved_orders=result.vip_approved_orders,
        vip_milestone_reached=result.vip_milestone_reached,
    )


@router.post(
    "/{order_id}/discard",
    response_model=OrderTransitionResponse,
    summary="Discard a pending order",
    description="Marks the order discarded. Stock is unchanged since it was never reduced.",
)
async def discard_order(
    order_id: UUID,
    actor: StaffAccount,
    order_service: OrderService = Depends(get_order_service),
) -> OrderTransitionResponse:
    order = await order_service.discard_order(actor, order_id)
    return OrderTransitionResponse(
        order=OrderResponse(**order),
        message="Order discarded successfully",
    )
