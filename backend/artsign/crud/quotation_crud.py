# backend/artsign/crud/quotation_crud.py
"""
Operaciones CRUD para cotizaciones (Quotation) y sus líneas.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from artsign.crud.pagination import paginate
from artsign.db.models.quotation_model import Quotation, QuotationItem
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.quotation_schema import QuotationFilter


def _quotation_options():
    return (
        selectinload(Quotation.user),
        selectinload(Quotation.items).selectinload(QuotationItem.product),
    )


async def get_quotation(db: AsyncSession, quotation_id: str) -> Optional[Quotation]:
    result = await db.execute(
        select(Quotation)
        .options(*_quotation_options())
        .filter(Quotation.id == quotation_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_quotation_by_number(db: AsyncSession, quotation_number: str) -> Optional[Quotation]:
    result = await db.execute(
        select(Quotation)
        .options(*_quotation_options())
        .filter(Quotation.quotation_number == quotation_number)
    )
    return result.scalars().first()


async def get_quotations(
    db: AsyncSession,
    pagination: PaginationParams,
    filters: Optional[QuotationFilter] = None,
) -> Tuple[List[Quotation], int]:
    query = select(Quotation).options(*_quotation_options())
    filters = filters or QuotationFilter()

    if filters.status:
        query = query.filter(Quotation.status == filters.status)
    if filters.user_id:
        query = query.filter(Quotation.user_id == filters.user_id)
    if filters.salesman:
        query = query.filter(Quotation.salesman.ilike(f"%{filters.salesman}%"))
    if filters.date_from:
        query = query.filter(Quotation.created_at >= filters.date_from)
    if filters.date_to:
        query = query.filter(Quotation.created_at <= filters.date_to)
    if filters.min_amount is not None:
        query = query.filter(Quotation.total_amount >= filters.min_amount)
    if filters.max_amount is not None:
        query = query.filter(Quotation.total_amount <= filters.max_amount)
    if filters.search:
        term = f"%{filters.search}%"
        query = query.filter(
            or_(
                Quotation.quotation_number.ilike(term),
                Quotation.title.ilike(term),
                Quotation.description.ilike(term),
            )
        )

    return await paginate(db, query, Quotation, pagination)


async def create_quotation(
    db: AsyncSession, quotation_data: Dict[str, Any], items: List[Dict[str, Any]]
) -> Quotation:
    db_quotation = Quotation(**quotation_data)
    db_quotation.items = [QuotationItem(**item) for item in items]
    db.add(db_quotation)
    await db.flush()
    return db_quotation


async def update_quotation(
    db: AsyncSession, db_quotation: Quotation, update_data: Dict[str, Any]
) -> Quotation:
    for key, value in update_data.items():
        setattr(db_quotation, key, value)
    await db.flush()
    return db_quotation


async def delete_quotation(db: AsyncSession, db_quotation: Quotation) -> None:
    await db.delete(db_quotation)
    await db.flush()
