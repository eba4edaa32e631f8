# backend/artsign/services/customer_service.py
"""
Servicio de clientes: perfil comercial, límite de crédito y estadísticas
de gasto asociadas a un usuario.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.enums import AuditAction
from artsign.core.exceptions import BadRequestError, ConflictError, NotFoundError, UserNotFoundError
from artsign.core.utils import to_money
from artsign.crud import customer_crud, user_crud
from artsign.db.models.customer_model import Customer
from artsign.db.unit_of_work import unit_of_work
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.customer_schema import (
    CustomerCreate,
    CustomerFilter,
    CustomerSelfUpdate,
    CustomerUpdate,
)
from artsign.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class CustomerService:
    """Gestión de perfiles de cliente. Un perfil por usuario."""

    def __init__(self, audit_service: AuditService):
        self.audit = audit_service

    # ========================================
    # CONSULTAS
    # ========================================

    async def get_customers(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        filters: Optional[CustomerFilter] = None,
    ) -> Tuple[List[Customer], int]:
        return await customer_crud.get_customers(db, pagination, filters)

    async def get_customer_by_id(self, db: AsyncSession, customer_id: str) -> Customer:
        customer = await customer_crud.get_customer(db, customer_id)
        if not customer:
            raise NotFoundError("Customer not found")
        return customer

    async def get_customer_by_user_id(self, db: AsyncSession, user_id: str) -> Customer:
        customer = await customer_crud.get_customer_by_user_id(db, user_id)
        if not customer:
            raise NotFoundError("Customer profile not found")
        return customer

    # ========================================
    # ESCRITURA
    # ========================================

    async def create_customer(
        self,
        db: AsyncSession,
        customer_in: CustomerCreate,
        created_by: Optional[str] = None,
    ) -> Customer:
        """
        Crea el perfil comercial de un usuario.

        Raises:
            UserNotFoundError: el usuario no existe
            ConflictError: el usuario ya tiene perfil de cliente
        """
        user_id = customer_in.user_id or created_by
        async with unit_of_work(db):
            if not await user_crud.get_user(db, user_id):
                raise UserNotFoundError()
            if await customer_crud.get_customer_by_user_id(db, user_id):
                raise ConflictError("Customer profile already exists for this user")

            customer_data = customer_in.model_dump(exclude={"user_id"})
            customer_data["user_id"] = user_id
            customer_data["credit_limit"] = to_money(customer_in.credit_limit)

            try:
                customer = await customer_crud.create_customer(db, customer_data)
            except IntegrityError:
                raise ConflictError("Customer profile already exists for this user")

            await self.audit.log(
                db,
                user_id=created_by,
                action=AuditAction.CREATE,
                entity="Customer",
                entity_id=customer.id,
                changes=customer_data,
            )

        logger.info(f"👤 CLIENTE: perfil creado para usuario {user_id}")
        return customer

    async def update_customer(
        self,
        db: AsyncSession,
        customer_id: str,
        customer_in: CustomerUpdate,
        user_id: Optional[str] = None,
    ) -> Customer:
        async with unit_of_work(db):
            customer = await self.get_customer_by_id(db, customer_id)
            update_data = customer_in.model_dump(exclude_unset=True)
            if update_data.get("credit_limit") is not None:
                update_data["credit_limit"] = to_money(update_data["credit_limit"])
            await customer_crud.update_customer(db, customer, update_data)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Customer",
                entity_id=customer.id,
                changes=update_data,
            )
        return customer

    async def update_customer_by_user_id(
        self,
        db: AsyncSession,
        user_id: str,
        customer_in: CustomerSelfUpdate,
    ) -> Customer:
        """El propio cliente actualiza los campos permitidos de su perfil."""
        async with unit_of_work(db):
            customer = await self.get_customer_by_user_id(db, user_id)
            update_data = customer_in.model_dump(exclude_unset=True)
            await customer_crud.update_customer(db, customer, update_data)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Customer",
                entity_id=customer.id,
                changes=update_data,
            )
        return customer

    async def delete_customer(self, db: AsyncSession, customer_id: str, user_id: Optional[str] = None) -> None:
        async with unit_of_work(db):
            customer = await self.get_customer_by_id(db, customer_id)
            await customer_crud.delete_customer(db, customer)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.DELETE,
                entity="Customer",
                entity_id=customer_id,
                changes={"user_id": customer.user_id},
            )
        logger.info(f"🗑️ CLIENTE: perfil {customer_id} eliminado")

    async def update_credit_used(
        self,
        db: AsyncSession,
        user_id: str,
        amount: Union[Decimal, float, int],
        performed_by: Optional[str] = None,
    ) -> Customer:
        """
        Suma `amount` al crédito consumido del cliente.

        Raises:
            NotFoundError: el usuario no tiene perfil de cliente
            BadRequestError: se superaría el límite de crédito
        """
        async with unit_of_work(db):
            customer = await self.get_customer_by_user_id(db, user_id)
            new_credit_used = to_money(customer.credit_used) + to_money(amount)
            if new_credit_used > to_money(customer.credit_limit):
                raise BadRequestError("Credit limit exceeded")

            await customer_crud.update_customer(db, customer, {"credit_used": new_credit_used})
            await self.audit.log(
                db,
                user_id=performed_by,
                action=AuditAction.UPDATE,
                entity="Customer",
                entity_id=customer.id,
                changes={"credit_used": new_credit_used},
            )
        return customer

    async def update_customer_stats(
        self,
        db: AsyncSession,
        user_id: str,
        amount: Union[Decimal, float, int],
    ) -> Customer:
        """Acumula `amount` en el total gastado del cliente."""
        async with unit_of_work(db):
            customer = await self.get_customer_by_user_id(db, user_id)
            total_spent = to_money(customer.total_spent) + to_money(amount)
            await customer_crud.update_customer(db, customer, {"total_spent": total_spent})
            await self.audit.log(
                db,
                user_id=None,
                action=AuditAction.UPDATE,
                entity="Customer",
                entity_id=customer.id,
                changes={"total_spent": total_spent},
            )
        return customer
