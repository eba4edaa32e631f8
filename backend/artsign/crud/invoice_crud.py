# backend/artsign/crud/invoice_crud.py
"""
Operaciones CRUD para facturas (Invoice).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from artsign.core.enums import InvoiceStatus
from artsign.crud.pagination import paginate
from artsign.db.models.invoice_model import Invoice
from artsign.db.models.order_model import Order
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.invoice_schema import InvoiceFilter


def _invoice_options():
    return (selectinload(Invoice.order), selectinload(Invoice.user))


async def get_invoice(db: AsyncSession, invoice_id: str) -> Optional[Invoice]:
    result = await db.execute(
        select(Invoice)
        .options(*_invoice_options())
        .filter(Invoice.id == invoice_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_invoice_by_number(db: AsyncSession, invoice_number: str) -> Optional[Invoice]:
    result = await db.execute(
        select(Invoice).options(*_invoice_options()).filter(Invoice.invoice_number == invoice_number)
    )
    return result.scalars().first()


async def get_invoice_by_order_id(db: AsyncSession, order_id: str) -> Optional[Invoice]:
    result = await db.execute(
        select(Invoice).options(*_invoice_options()).filter(Invoice.order_id == order_id)
    )
    return result.scalars().first()


async def get_invoices(
    db: AsyncSession,
    pagination: PaginationParams,
    filters: Optional[InvoiceFilter] = None,
    now: Optional[datetime] = None,
) -> Tuple[List[Invoice], int]:
    query = select(Invoice).options(*_invoice_options())
    filters = filters or InvoiceFilter()

    if filters.status:
        query = query.filter(Invoice.status == filters.status)
    if filters.user_id:
        query = query.filter(Invoice.user_id == filters.user_id)
    if filters.order_id:
        query = query.filter(Invoice.order_id == filters.order_id)
    if filters.date_from:
        query = query.filter(Invoice.created_at >= filters.date_from)
    if filters.date_to:
        query = query.filter(Invoice.created_at <= filters.date_to)
    if filters.due_date_from:
        query = query.filter(Invoice.due_date >= filters.due_date_from)
    if filters.due_date_to:
        query = query.filter(Invoice.due_date <= filters.due_date_to)
    if filters.min_amount is not None:
        query = query.filter(Invoice.amount >= filters.min_amount)
    if filters.max_amount is not None:
        query = query.filter(Invoice.amount <= filters.max_amount)
    if filters.overdue and now is not None:
        query = query.filter(
            Invoice.status != InvoiceStatus.PAID.value,
            Invoice.due_date < now,
        )
    if filters.search:
        term = f"%{filters.search}%"
        query = query.join(Invoice.order).filter(
            or_(Invoice.invoice_number.ilike(term), Order.order_number.ilike(term))
        )

    return await paginate(db, query, Invoice, pagination)


async def get_overdue_invoices(db: AsyncSession, now: datetime) -> List[Invoice]:
    """Facturas no pagadas con vencimiento anterior a `now`."""
    result = await db.execute(
        select(Invoice)
        .options(*_invoice_options())
        .filter(
            Invoice.status.in_([InvoiceStatus.UNPAID.value, InvoiceStatus.OVERDUE.value]),
            Invoice.due_date < now,
        )
        .order_by(Invoice.due_date.asc())
    )
    return list(result.scalars().all())


async def create_invoice(db: AsyncSession, invoice_data: Dict[str, Any]) -> Invoice:
    db_invoice = Invoice(**invoice_data)
    db.add(db_invoice)
    await db.flush()
    return db_invoice


async def update_invoice(db: AsyncSession, db_invoice: Invoice, update_data: Dict[str, Any]) -> Invoice:
    for key, value in update_data.items():
        setattr(db_invoice, key, value)
    await db.flush()
    return db_invoice


async def delete_invoice(db: AsyncSession, db_invoice: Invoice) -> None:
    await db.delete(db_invoice)
    await db.flush()


async def mark_overdue(db: AsyncSession, now: datetime) -> List[str]:
    """Pasa a OVERDUE, en bloque, las facturas UNPAID vencidas. Devuelve sus IDs."""
    result = await db.execute(
        select(Invoice.id).where(Invoice.status == InvoiceStatus.UNPAID.value, Invoice.due_date < now)
    )
    invoice_ids = list(result.scalars().all())
    if not invoice_ids:
        return []

    await db.execute(
        update(Invoice)
        .where(Invoice.id.in_(invoice_ids), Invoice.status == InvoiceStatus.UNPAID.value)
        .values(status=InvoiceStatus.OVERDUE.value)
        .execution_options(synchronize_session=False)
    )
    return invoice_ids
