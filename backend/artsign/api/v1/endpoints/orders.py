# backend/artsign/api/v1/endpoints/orders.py

"""
Endpoints REST para pedidos.

Cualquier usuario autenticado puede crear pedidos y ver los suyos; la gestión
(listado global, estados, seguimiento, cancelación) es para gestores y el
borrado para super administradores.
"""

from datetime import datetime
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.api import deps
from artsign.core.enums import OrderStatus, PaymentStatus
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import ApiResponse, Paginated, PaginationParams, build_page
from artsign.schemas import order_schema
from artsign.services.order_service import OrderService

logger = logging.getLogger(__name__)
router = APIRouter()

OrderOut = order_schema.OrderResponse


@router.post("/", response_model=ApiResponse[OrderOut], status_code=status.HTTP_201_CREATED)
async def create_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.get_current_user),
    order_in: order_schema.OrderCreate,
):
    """Crea un pedido para el usuario autenticado."""
    logger.info(f"🛒 PEDIDO: usuario {current_user.id} crea pedido con {len(order_in.items)} items")
    order = await service.create_order(db, current_user.id, order_in)
    return ApiResponse(data=OrderOut.model_validate(order), message="Order created successfully")


@router.get("/my-orders", response_model=ApiResponse[Paginated[OrderOut]])
async def read_my_orders(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.get_current_user),
    pagination: PaginationParams = Depends(deps.get_pagination),
):
    orders, total = await service.get_user_orders(db, current_user.id, pagination)
    return ApiResponse(data=build_page(OrderOut, orders, total, pagination))


@router.get("/", response_model=ApiResponse[Paginated[OrderOut]])
async def read_orders(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    _: User = Depends(deps.require_manager),
    pagination: PaginationParams = Depends(deps.get_pagination),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = None,
    user_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
    search: Optional[str] = None,
):
    filters = order_schema.OrderFilter(
        status=status_filter,
        payment_status=payment_status,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        search=search,
    )
    orders, total = await service.get_orders(db, pagination, filters)
    return ApiResponse(data=build_page(OrderOut, orders, total, pagination))


@router.get("/number/{order_number}", response_model=ApiResponse[OrderOut])
async def read_order_by_number(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    _: User = Depends(deps.require_manager),
    order_number: str,
):
    order = await service.get_order_by_number(db, order_number)
    return ApiResponse(data=OrderOut.model_validate(order))


@router.get("/{order_id}", response_model=ApiResponse[OrderOut])
async def read_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.get_current_user),
    order_id: str,
):
    order = await service.get_order_by_id(db, order_id)
    deps.ensure_self_or_manager(current_user, order.user_id)
    return ApiResponse(data=OrderOut.model_validate(order))


@router.put("/{order_id}", response_model=ApiResponse[OrderOut])
async def update_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.require_manager),
    order_id: str,
    order_in: order_schema.OrderUpdate,
):
    order = await service.update_order(db, order_id, order_in, user_id=current_user.id)
    return ApiResponse(data=OrderOut.model_validate(order), message="Order updated successfully")


@router.patch("/{order_id}/status", response_model=ApiResponse[OrderOut])
async def update_order_status(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.require_manager),
    order_id: str,
    status_in: order_schema.OrderStatusUpdate,
):
    order = await service.update_order_status(db, order_id, status_in.status, user_id=current_user.id)
    return ApiResponse(data=OrderOut.model_validate(order), message="Order status updated successfully")


@router.patch("/{order_id}/payment-status", response_model=ApiResponse[OrderOut])
async def update_payment_status(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.require_manager),
    order_id: str,
    payment_in: order_schema.PaymentStatusUpdate,
):
    order = await service.update_payment_status(db, order_id, payment_in.payment_status, user_id=current_user.id)
    return ApiResponse(data=OrderOut.model_validate(order), message="Payment status updated successfully")


@router.patch("/{order_id}/tracking", response_model=ApiResponse[OrderOut])
async def add_tracking_number(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.require_manager),
    order_id: str,
    tracking_in: order_schema.TrackingNumberUpdate,
):
    order = await service.add_tracking_number(db, order_id, tracking_in.tracking_number, user_id=current_user.id)
    return ApiResponse(data=OrderOut.model_validate(order), message="Tracking number added successfully")


@router.patch("/{order_id}/cancel", response_model=ApiResponse[OrderOut])
async def cancel_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.require_manager),
    order_id: str,
):
    order = await service.cancel_order(db, order_id, user_id=current_user.id)
    return ApiResponse(data=OrderOut.model_validate(order), message="Order cancelled successfully")


@router.delete("/{order_id}", response_model=ApiResponse[None])
async def delete_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(deps.get_order_service),
    current_user: User = Depends(deps.require_super_admin),
    order_id: str,
):
    await service.delete_order(db, order_id, user_id=current_user.id)
    return ApiResponse(message="Order deleted successfully")
