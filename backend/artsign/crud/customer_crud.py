# backend/artsign/crud/customer_crud.py
"""
Operaciones CRUD para el perfil comercial de cliente (Customer).
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.crud.pagination import paginate
from artsign.db.models.customer_model import Customer
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.customer_schema import CustomerFilter


async def get_customer(db: AsyncSession, customer_id: str) -> Optional[Customer]:
    """Obtiene un cliente por su ID."""
    result = await db.execute(select(Customer).filter(Customer.id == customer_id))
    return result.scalars().first()


async def get_customer_by_user_id(db: AsyncSession, user_id: str) -> Optional[Customer]:
    """Obtiene el perfil de cliente asociado a un usuario."""
    result = await db.execute(select(Customer).filter(Customer.user_id == user_id))
    return result.scalars().first()


async def get_customers(
    db: AsyncSession,
    pagination: PaginationParams,
    filters: Optional[CustomerFilter] = None,
) -> Tuple[List[Customer], int]:
    query = select(Customer)
    filters = filters or CustomerFilter()

    if filters.customer_status:
        query = query.filter(Customer.customer_status == filters.customer_status)
    if filters.customer_type:
        query = query.filter(Customer.customer_type == filters.customer_type)
    if filters.min_credit_limit is not None:
        query = query.filter(Customer.credit_limit >= filters.min_credit_limit)
    if filters.max_credit_limit is not None:
        query = query.filter(Customer.credit_limit <= filters.max_credit_limit)
    if filters.min_total_spent is not None:
        query = query.filter(Customer.total_spent >= filters.min_total_spent)
    if filters.max_total_spent is not None:
        query = query.filter(Customer.total_spent <= filters.max_total_spent)
    if filters.salesman:
        query = query.filter(Customer.salesman.ilike(f"%{filters.salesman}%"))

    return await paginate(db, query, Customer, pagination)


async def create_customer(db: AsyncSession, customer_data: Dict[str, Any]) -> Customer:
    db_customer = Customer(**customer_data)
    db.add(db_customer)
    await db.flush()
    return db_customer


async def update_customer(db: AsyncSession, db_customer: Customer, update_data: Dict[str, Any]) -> Customer:
    for key, value in update_data.items():
        setattr(db_customer, key, value)
    await db.flush()
    return db_customer


async def delete_customer(db: AsyncSession, db_customer: Customer) -> None:
    await db.delete(db_customer)
    await db.flush()
