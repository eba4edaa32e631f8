# backend/artsign/crud/user_crud.py
"""
Lectura de usuarios. El alta y la gestión de usuarios viven en otro servicio;
aquí solo se consultan para validar propietarios y para la autenticación.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.db.models.user_model import User


async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    """Obtiene un usuario por su ID."""
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalars().first()
