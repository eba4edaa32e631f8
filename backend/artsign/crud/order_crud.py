# backend/artsign/crud/order_crud.py
"""
Operaciones CRUD para el modelo Order.

Este módulo proporciona funciones para crear y consultar pedidos con sus
líneas. Las lecturas precargan usuario y productos de cada línea para que
la respuesta pueda construirse sin cargas perezosas en contexto asíncrono.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from artsign.crud.pagination import paginate
from artsign.db.models.order_model import Order, OrderItem
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.order_schema import OrderFilter


def _order_options():
    return (
        selectinload(Order.user),
        selectinload(Order.items).selectinload(OrderItem.product),
    )


async def get_order(db: AsyncSession, order_id: str) -> Optional[Order]:
    """
    Obtiene un pedido por su ID con usuario e items precargados.
    populate_existing refresca la instancia si ya estaba en la sesión.
    """
    result = await db.execute(
        select(Order)
        .options(*_order_options())
        .filter(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_order_by_number(db: AsyncSession, order_number: str) -> Optional[Order]:
    result = await db.execute(
        select(Order).options(*_order_options()).filter(Order.order_number == order_number)
    )
    return result.scalars().first()


async def get_orders(
    db: AsyncSession,
    pagination: PaginationParams,
    filters: Optional[OrderFilter] = None,
) -> Tuple[List[Order], int]:
    """Listado paginado de pedidos con filtros combinables."""
    query = select(Order).options(*_order_options())
    filters = filters or OrderFilter()

    if filters.status:
        query = query.filter(Order.status == filters.status)
    if filters.payment_status:
        query = query.filter(Order.payment_status == filters.payment_status)
    if filters.user_id:
        query = query.filter(Order.user_id == filters.user_id)
    if filters.date_from:
        query = query.filter(Order.created_at >= filters.date_from)
    if filters.date_to:
        query = query.filter(Order.created_at <= filters.date_to)
    if filters.min_amount is not None:
        query = query.filter(Order.total_amount >= filters.min_amount)
    if filters.max_amount is not None:
        query = query.filter(Order.total_amount <= filters.max_amount)
    if filters.search:
        term = f"%{filters.search}%"
        query = query.join(Order.user).filter(
            or_(
                Order.order_number.ilike(term),
                User.first_name.ilike(term),
                User.last_name.ilike(term),
                User.email.ilike(term),
            )
        )

    return await paginate(db, query, Order, pagination)


async def create_order(db: AsyncSession, order_data: Dict[str, Any], items: List[Dict[str, Any]]) -> Order:
    """
    Añade el pedido y sus líneas a la sesión (flush, sin commit).
    """
    db_order = Order(**order_data)
    db_order.items = [OrderItem(**item) for item in items]
    db.add(db_order)
    await db.flush()
    return db_order


async def update_order(db: AsyncSession, db_order: Order, update_data: Dict[str, Any]) -> Order:
    for key, value in update_data.items():
        setattr(db_order, key, value)
    await db.flush()
    return db_order


async def delete_order(db: AsyncSession, db_order: Order) -> None:
    """Elimina el pedido; las líneas se borran en cascada."""
    await db.delete(db_order)
    await db.flush()
