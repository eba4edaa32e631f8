# backend/artsign/services/invoice_service.py

"""
Servicio de facturación.

Una factura por pedido: se comprueba antes de insertar y, además, la columna
invoices.order_id es UNIQUE, de modo que dos peticiones simultáneas nunca
generan dos facturas para el mismo pedido.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.config import Settings
from artsign.core.enums import AuditAction, InvoiceStatus
from artsign.core.exceptions import BadRequestError, ConflictError, NotFoundError, UserNotFoundError
from artsign.core.utils import ensure_utc, generate_document_number, to_money, utcnow
from artsign.crud import invoice_crud, order_crud, user_crud
from artsign.db.models.invoice_model import Invoice
from artsign.db.unit_of_work import unit_of_work
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.invoice_schema import InvoiceCreate, InvoiceFilter, InvoiceUpdate
from artsign.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class InvoiceService:
    """Emisión, cobro y vencimiento de facturas."""

    def __init__(self, settings: Settings, audit_service: AuditService):
        self.settings = settings
        self.audit = audit_service

    # ========================================
    # CONSULTAS
    # ========================================

    async def get_invoice_by_id(self, db: AsyncSession, invoice_id: str) -> Invoice:
        invoice = await invoice_crud.get_invoice(db, invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    async def get_invoice_by_number(self, db: AsyncSession, invoice_number: str) -> Invoice:
        invoice = await invoice_crud.get_invoice_by_number(db, invoice_number)
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    async def get_invoices(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        filters: Optional[InvoiceFilter] = None,
    ) -> Tuple[List[Invoice], int]:
        return await invoice_crud.get_invoices(db, pagination, filters, now=utcnow())

    async def get_user_invoices(
        self, db: AsyncSession, user_id: str, pagination: PaginationParams
    ) -> Tuple[List[Invoice], int]:
        return await invoice_crud.get_invoices(db, pagination, InvoiceFilter(user_id=user_id), now=utcnow())

    async def get_invoices_by_order(self, db: AsyncSession, order_id: str) -> List[Invoice]:
        if not await order_crud.get_order(db, order_id):
            raise NotFoundError("Order not found")
        invoice = await invoice_crud.get_invoice_by_order_id(db, order_id)
        return [invoice] if invoice else []

    async def get_overdue_invoices(self, db: AsyncSession) -> List[Invoice]:
        return await invoice_crud.get_overdue_invoices(db, utcnow())

    # ========================================
    # EMISIÓN
    # ========================================

    async def create_invoice(
        self, db: AsyncSession, invoice_in: InvoiceCreate, created_by: Optional[str] = None
    ) -> Invoice:
        """
        Emite una factura para un pedido.

        Raises:
            NotFoundError: el pedido no existe
            UserNotFoundError: el usuario no existe
            ConflictError: el pedido ya tiene factura
        """
        return await self._issue(
            db,
            order_id=invoice_in.order_id,
            user_id=invoice_in.user_id,
            amount=to_money(invoice_in.amount),
            due_date=invoice_in.due_date,
            created_by=created_by,
        )

    async def generate_invoice_from_order(
        self,
        db: AsyncSession,
        order_id: str,
        due_date: Optional[datetime] = None,
        created_by: Optional[str] = None,
    ) -> Invoice:
        """
        Emite la factura de un pedido por su importe total. Si no se indica
        vencimiento, vence a INVOICE_DUE_DAYS días.
        """
        order = await order_crud.get_order(db, order_id)
        if not order:
            raise NotFoundError("Order not found")

        if due_date is None:
            due_date = utcnow() + timedelta(days=self.settings.INVOICE_DUE_DAYS)

        return await self._issue(
            db,
            order_id=order.id,
            user_id=order.user_id,
            amount=to_money(order.total_amount),
            due_date=due_date,
            created_by=created_by,
        )

    async def _issue(
        self,
        db: AsyncSession,
        *,
        order_id: str,
        user_id: str,
        amount: Decimal,
        due_date: datetime,
        created_by: Optional[str],
    ) -> Invoice:
        async with unit_of_work(db):
            if not await order_crud.get_order(db, order_id):
                raise NotFoundError("Order not found")
            if not await user_crud.get_user(db, user_id):
                raise UserNotFoundError()
            if await invoice_crud.get_invoice_by_order_id(db, order_id):
                raise ConflictError("Invoice already exists for this order")

            try:
                invoice = await invoice_crud.create_invoice(
                    db,
                    {
                        "invoice_number": generate_document_number("INV"),
                        "order_id": order_id,
                        "user_id": user_id,
                        "amount": amount,
                        "status": InvoiceStatus.UNPAID.value,
                        "due_date": ensure_utc(due_date),
                    },
                )
            except IntegrityError:
                raise ConflictError("Invoice already exists for this order")

            await self.audit.log(
                db,
                user_id=created_by,
                action=AuditAction.CREATE,
                entity="Invoice",
                entity_id=invoice.id,
                changes={"invoice_number": invoice.invoice_number, "order_id": order_id, "amount": amount},
            )

        logger.info(f"🧾 FACTURA: {invoice.invoice_number} emitida para pedido {order_id} ({amount})")
        return await invoice_crud.get_invoice(db, invoice.id)

    # ========================================
    # ACTUALIZACIÓN Y COBRO
    # ========================================

    async def update_invoice(
        self,
        db: AsyncSession,
        invoice_id: str,
        invoice_in: InvoiceUpdate,
        user_id: Optional[str] = None,
    ) -> Invoice:
        async with unit_of_work(db):
            invoice = await self.get_invoice_by_id(db, invoice_id)
            update_data = invoice_in.model_dump(exclude_unset=True)
            if update_data.get("amount") is not None:
                update_data["amount"] = to_money(update_data["amount"])
            for field in ("due_date", "paid_date"):
                if update_data.get(field) is not None:
                    update_data[field] = ensure_utc(update_data[field])

            await invoice_crud.update_invoice(db, invoice, update_data)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Invoice",
                entity_id=invoice.id,
                changes=update_data,
            )
        return await invoice_crud.get_invoice(db, invoice_id)

    async def mark_as_paid(
        self,
        db: AsyncSession,
        invoice_id: str,
        paid_date: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> Invoice:
        invoice = await self.update_invoice(
            db,
            invoice_id,
            InvoiceUpdate(status=InvoiceStatus.PAID, paid_date=paid_date or utcnow()),
            user_id,
        )
        logger.info(f"💰 FACTURA: {invoice.invoice_number} pagada")
        return invoice

    async def mark_as_unpaid(self, db: AsyncSession, invoice_id: str, user_id: Optional[str] = None) -> Invoice:
        return await self.update_invoice(
            db,
            invoice_id,
            InvoiceUpdate(status=InvoiceStatus.UNPAID, paid_date=None),
            user_id,
        )

    async def delete_invoice(self, db: AsyncSession, invoice_id: str, user_id: Optional[str] = None) -> None:
        async with unit_of_work(db):
            invoice = await self.get_invoice_by_id(db, invoice_id)
            if invoice.status == InvoiceStatus.PAID.value:
                raise BadRequestError("Cannot delete paid invoices")

            await invoice_crud.delete_invoice(db, invoice)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.DELETE,
                entity="Invoice",
                entity_id=invoice_id,
                changes={"invoice_number": invoice.invoice_number},
            )
        logger.info(f"🗑️ FACTURA: {invoice.invoice_number} eliminada")

    # ========================================
    # VENCIMIENTOS
    # ========================================

    async def update_overdue_status(self, db: AsyncSession) -> int:
        """
        Marca como OVERDUE las facturas UNPAID cuyo vencimiento ya pasó.
        Devuelve el número de facturas actualizadas. Es un proceso de sistema:
        la auditoría se registra sin usuario.
        """
        async with unit_of_work(db):
            invoice_ids = await invoice_crud.mark_overdue(db, utcnow())
            for invoice_id in invoice_ids:
                await self.audit.log(
                    db,
                    user_id=None,
                    action=AuditAction.UPDATE,
                    entity="Invoice",
                    entity_id=invoice_id,
                    changes={"status": {"from": InvoiceStatus.UNPAID.value, "to": InvoiceStatus.OVERDUE.value}},
                )
        count = len(invoice_ids)
        if count:
            logger.info(f"⏰ FACTURAS: {count} marcadas como vencidas")
        return count
