# backend/artsign/services/category_service.py

"""
Capa de servicios para las categorías del catálogo.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.enums import AuditAction
from artsign.core.exceptions import ConflictError, NotFoundError
from artsign.crud import category_crud
from artsign.db.models.category_model import Category
from artsign.db.unit_of_work import unit_of_work
from artsign.schemas.category_schema import CategoryCreate
from artsign.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class CategoryService:
    """Servicio para operaciones de negocio relacionadas con categorías."""

    def __init__(self, audit_service: AuditService):
        self.audit = audit_service

    async def get_categories(self, db: AsyncSession) -> List[Category]:
        return await category_crud.get_categories(db)

    async def get_category_by_id(self, db: AsyncSession, category_id: str) -> Category:
        category = await category_crud.get_category(db, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    async def create_category(
        self, db: AsyncSession, category_in: CategoryCreate, user_id: Optional[str] = None
    ) -> Category:
        """Crea una categoría. El nombre es único."""
        async with unit_of_work(db):
            if await category_crud.get_category_by_name(db, category_in.name):
                raise ConflictError(f"Category '{category_in.name}' already exists")

            category = await category_crud.create_category(
                db, name=category_in.name, description=category_in.description
            )
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.CREATE,
                entity="Category",
                entity_id=category.id,
                changes=category_in.model_dump(),
            )

        logger.info(f"🗂️ CATEGORÍA: creada '{category.name}' ({category.id})")
        return category
