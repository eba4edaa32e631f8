# backend/artsign/schemas/common_schema.py
"""
Esquemas comunes: parámetros de paginación y sobres de respuesta.

Todas las respuestas de la API siguen el formato
`{success, data?, message?}`; los listados paginados llevan en `data`
el objeto `{data: [...], pagination: {page, limit, total, pages}}`.
"""

import math
from typing import Any, Generic, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Parámetros de paginación y ordenación recibidos por query string."""
    page: int = Field(1, ge=1, description="Página (empieza en 1)")
    limit: int = Field(10, ge=1, le=100, description="Registros por página")
    sort_by: str = Field("created_at", description="Columna de ordenación")
    sort_order: Literal["asc", "desc"] = Field("desc", description="Dirección de ordenación")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, params: PaginationParams, total: int) -> "Pagination":
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            pages=math.ceil(total / params.limit) if params.limit else 0,
        )


class Paginated(BaseModel, Generic[T]):
    data: List[T]
    pagination: Pagination


class ApiResponse(BaseModel, Generic[T]):
    """Sobre estándar de respuesta."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


def build_page(schema: Type[BaseModel], records: List[Any], total: int, params: PaginationParams) -> Paginated:
    """Convierte (registros, total) en la página tipada que devuelve la API."""
    return Paginated[schema](
        data=[schema.model_validate(record) for record in records],
        pagination=Pagination.build(params, total),
    )
