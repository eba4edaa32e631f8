# backend/artsign/crud/pagination.py
"""
Paginación y ordenación comunes a todas las consultas de listado.

Devuelve siempre la tupla (registros, total) para que los servicios armen
la respuesta paginada.
"""

from typing import Any, List, Tuple, Type

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.schemas.common_schema import PaginationParams


def apply_sorting(query: Select, model: Type[Any], pagination: PaginationParams) -> Select:
    """Ordena por la columna pedida; si no existe en el modelo, por created_at."""
    column = model.__table__.columns.get(pagination.sort_by)
    if column is None:
        column = model.__table__.columns["created_at"]
    return query.order_by(column.desc() if pagination.sort_order == "desc" else column.asc())


async def paginate(
    db: AsyncSession,
    query: Select,
    model: Type[Any],
    pagination: PaginationParams,
) -> Tuple[List[Any], int]:
    """Ejecuta la consulta con offset/limit y cuenta el total sin paginar."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await db.scalar(count_query) or 0

    query = apply_sorting(query, model, pagination)
    query = query.offset(pagination.skip).limit(pagination.limit)
    result = await db.execute(query)
    return list(result.scalars().unique().all()), int(total)
