# backend/artsign/services/quotation_service.py

"""
Servicio de cotizaciones (presupuestos).

Ciclo de vida:
    PENDING/SENT --accept--> ACCEPTED --convert--> (se crea un Order)
                 --reject--> REJECTED

Las cotizaciones nunca tocan el inventario, ni al crearse ni al
convertirse en pedido.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.config import Settings
from artsign.core.enums import (
    ACCEPTABLE_QUOTATION_STATUSES,
    AuditAction,
    OrderStatus,
    PaymentStatus,
    QuotationStatus,
)
from artsign.core.exceptions import BadRequestError, NotFoundError, UserNotFoundError
from artsign.core.utils import compute_totals, ensure_utc, generate_document_number, to_money, utcnow
from artsign.crud import order_crud, product_crud, quotation_crud, user_crud
from artsign.db.models.quotation_model import Quotation
from artsign.db.unit_of_work import unit_of_work
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.quotation_schema import QuotationCreate, QuotationFilter, QuotationUpdate
from artsign.services.audit_service import AuditService

logger = logging.getLogger(__name__)


def _is_expired(quotation: Quotation) -> bool:
    return utcnow() > ensure_utc(quotation.valid_until)


class QuotationService:
    """Gestión de cotizaciones y su conversión en pedidos."""

    def __init__(self, settings: Settings, audit_service: AuditService):
        self.settings = settings
        self.audit = audit_service

    # ========================================
    # CONSULTAS
    # ========================================

    async def get_quotation_by_id(self, db: AsyncSession, quotation_id: str) -> Quotation:
        quotation = await quotation_crud.get_quotation(db, quotation_id)
        if not quotation:
            raise NotFoundError("Quotation not found")
        return quotation

    async def get_quotation_by_number(self, db: AsyncSession, quotation_number: str) -> Quotation:
        quotation = await quotation_crud.get_quotation_by_number(db, quotation_number)
        if not quotation:
            raise NotFoundError("Quotation not found")
        return quotation

    async def get_quotations(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        filters: Optional[QuotationFilter] = None,
    ) -> Tuple[List[Quotation], int]:
        return await quotation_crud.get_quotations(db, pagination, filters)

    async def get_user_quotations(
        self, db: AsyncSession, user_id: str, pagination: PaginationParams
    ) -> Tuple[List[Quotation], int]:
        return await quotation_crud.get_quotations(db, pagination, QuotationFilter(user_id=user_id))

    # ========================================
    # CREACIÓN Y EDICIÓN
    # ========================================

    async def create_quotation(
        self, db: AsyncSession, quotation_in: QuotationCreate, created_by: Optional[str] = None
    ) -> Quotation:
        """
        Crea una cotización para un cliente. Solo valida que existan el
        usuario y los productos; no comprueba stock.
        """
        async with unit_of_work(db):
            if not await user_crud.get_user(db, quotation_in.user_id):
                raise UserNotFoundError()

            products = await product_crud.get_products_by_ids(
                db, [item.product_id for item in quotation_in.items]
            )

            items_data: List[Dict] = []
            line_totals: List[Decimal] = []
            for item in quotation_in.items:
                if item.product_id not in products:
                    raise NotFoundError(f"Product {item.product_id} not found")
                unit_price = to_money(item.unit_price)
                total_price = to_money(unit_price * item.quantity)
                line_totals.append(total_price)
                items_data.append({
                    "product_id": item.product_id,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                    "total_price": total_price,
                    "specifications": item.specifications,
                })

            subtotal, tax_amount, total_amount = compute_totals(line_totals, self.settings.TAX_RATE)

            quotation = await quotation_crud.create_quotation(
                db,
                {
                    "quotation_number": generate_document_number("QUO"),
                    "user_id": quotation_in.user_id,
                    "title": quotation_in.title,
                    "description": quotation_in.description,
                    "salesman": quotation_in.salesman,
                    "valid_until": ensure_utc(quotation_in.valid_until),
                    "subtotal": subtotal,
                    "tax_amount": tax_amount,
                    "total_amount": total_amount,
                    "status": QuotationStatus.PENDING.value,
                    "notes": quotation_in.notes,
                },
                items_data,
            )
            await self.audit.log(
                db,
                user_id=created_by,
                action=AuditAction.CREATE,
                entity="Quotation",
                entity_id=quotation.id,
                changes={"quotation_number": quotation.quotation_number, "total_amount": total_amount},
            )

        logger.info(f"📄 COTIZACIÓN: {quotation.quotation_number} creada (total {total_amount})")
        return await quotation_crud.get_quotation(db, quotation.id)

    async def update_quotation(
        self,
        db: AsyncSession,
        quotation_id: str,
        quotation_in: QuotationUpdate,
        user_id: Optional[str] = None,
    ) -> Quotation:
        update_data = quotation_in.model_dump(exclude_unset=True)
        if update_data.get("valid_until") is not None:
            update_data["valid_until"] = ensure_utc(update_data["valid_until"])
        return await self._set_fields(db, quotation_id, update_data, user_id)

    async def update_quotation_status(
        self,
        db: AsyncSession,
        quotation_id: str,
        status: QuotationStatus,
        user_id: Optional[str] = None,
    ) -> Quotation:
        return await self._set_fields(db, quotation_id, {"status": QuotationStatus(status).value}, user_id)

    async def send_quotation(self, db: AsyncSession, quotation_id: str, user_id: Optional[str] = None) -> Quotation:
        """Marca la cotización como enviada al cliente."""
        return await self._set_fields(db, quotation_id, {"status": QuotationStatus.SENT.value}, user_id)

    async def delete_quotation(self, db: AsyncSession, quotation_id: str, user_id: Optional[str] = None) -> None:
        async with unit_of_work(db):
            quotation = await self.get_quotation_by_id(db, quotation_id)
            await quotation_crud.delete_quotation(db, quotation)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.DELETE,
                entity="Quotation",
                entity_id=quotation_id,
                changes={"quotation_number": quotation.quotation_number},
            )
        logger.info(f"🗑️ COTIZACIÓN: {quotation.quotation_number} eliminada")

    # ========================================
    # RESPUESTA DEL CLIENTE
    # ========================================

    async def accept_quotation(self, db: AsyncSession, quotation_id: str, user_id: Optional[str] = None) -> Quotation:
        """
        Acepta una cotización vigente en estado SENT o PENDING.
        La caducidad se comprueba antes que el estado.
        """
        async with unit_of_work(db):
            quotation = await self.get_quotation_by_id(db, quotation_id)
            if _is_expired(quotation):
                raise BadRequestError("Quotation has expired")
            if quotation.status not in ACCEPTABLE_QUOTATION_STATUSES:
                raise BadRequestError("Quotation cannot be accepted in its current status")

            await quotation_crud.update_quotation(db, quotation, {"status": QuotationStatus.ACCEPTED.value})
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Quotation",
                entity_id=quotation.id,
                changes={"status": QuotationStatus.ACCEPTED.value},
            )

        logger.info(f"✅ COTIZACIÓN: {quotation.quotation_number} aceptada")
        return await quotation_crud.get_quotation(db, quotation_id)

    async def reject_quotation(self, db: AsyncSession, quotation_id: str, user_id: Optional[str] = None) -> Quotation:
        """Rechaza la cotización sin comprobar estado ni caducidad."""
        quotation = await self._set_fields(db, quotation_id, {"status": QuotationStatus.REJECTED.value}, user_id)
        logger.info(f"🚫 COTIZACIÓN: {quotation.quotation_number} rechazada")
        return quotation

    # ========================================
    # CONVERSIÓN EN PEDIDO
    # ========================================

    async def convert_to_order(
        self, db: AsyncSession, quotation_id: str, user_id: Optional[str] = None
    ) -> Tuple[Quotation, str]:
        """
        Crea un pedido a partir de una cotización aceptada y vigente.

        Los importes se copian tal cual (sin envío ni recálculo) y no se valida
        ni descuenta stock. La cotización sigue en estado ACCEPTED.

        Returns:
            (cotización, id del pedido creado)
        """
        async with unit_of_work(db):
            quotation = await self.get_quotation_by_id(db, quotation_id)
            if quotation.status != QuotationStatus.ACCEPTED.value:
                raise BadRequestError("Only accepted quotations can be converted to orders")
            if _is_expired(quotation):
                raise BadRequestError("Quotation has expired")

            order = await order_crud.create_order(
                db,
                {
                    "order_number": generate_document_number("ORD"),
                    "user_id": quotation.user_id,
                    "status": OrderStatus.PENDING_PAYMENT.value,
                    "payment_status": PaymentStatus.PENDING.value,
                    "subtotal": quotation.subtotal,
                    "tax_amount": quotation.tax_amount,
                    "shipping_cost": to_money(0),
                    "total_amount": quotation.total_amount,
                    "shipping_method": self.settings.DEFAULT_SHIPPING_METHOD,
                    "notes": f"Created from quotation {quotation.quotation_number}",
                    "stock_deducted": False,
                },
                [
                    {
                        "product_id": item.product_id,
                        "quantity": item.quantity,
                        "unit_price": item.unit_price,
                        "total_price": item.total_price,
                        "specifications": item.specifications,
                    }
                    for item in quotation.items
                ],
            )
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.CREATE,
                entity="Order",
                entity_id=order.id,
                changes={"converted_from_quotation": quotation.id},
            )

        logger.info(f"🔁 COTIZACIÓN: {quotation.quotation_number} convertida en pedido {order.order_number}")
        return await quotation_crud.get_quotation(db, quotation_id), order.id

    async def _set_fields(
        self, db: AsyncSession, quotation_id: str, changes: dict, user_id: Optional[str]
    ) -> Quotation:
        async with unit_of_work(db):
            quotation = await self.get_quotation_by_id(db, quotation_id)
            await quotation_crud.update_quotation(db, quotation, changes)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Quotation",
                entity_id=quotation.id,
                changes=changes,
            )
        return await quotation_crud.get_quotation(db, quotation_id)
