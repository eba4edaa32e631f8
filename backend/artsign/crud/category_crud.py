# backend/artsign/crud/category_crud.py
"""
Operaciones CRUD para el modelo Category.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.db.models.category_model import Category


async def get_category(db: AsyncSession, category_id: str) -> Optional[Category]:
    """Obtiene una categoría por su ID."""
    result = await db.execute(select(Category).filter(Category.id == category_id))
    return result.scalars().first()


async def get_category_by_name(db: AsyncSession, name: str) -> Optional[Category]:
    result = await db.execute(select(Category).filter(Category.name == name))
    return result.scalars().first()


async def get_categories(db: AsyncSession) -> List[Category]:
    """Obtiene todas las categorías ordenadas por nombre."""
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def create_category(db: AsyncSession, name: str, description: Optional[str] = None) -> Category:
    """Crea una categoría dentro de la transacción en curso (sin commit)."""
    db_category = Category(name=name, description=description)
    db.add(db_category)
    await db.flush()
    return db_category
