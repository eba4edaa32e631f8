# backend/artsign/services/order_service.py

"""
Servicio de pedidos.

Flujo de creación de un pedido (todo en una única unidad de trabajo):
1. Validar usuario y productos, y el stock de los productos con control de inventario
2. Calcular importes: líneas, subtotal, impuesto (TAX_RATE) y total
3. Guardar pedido y líneas con un número ORD-<unixMillis>-<NNN>
4. Descontar stock a través de ProductService.adjust_stock
5. Registrar la auditoría

Si cualquier paso falla, no queda ni el pedido ni el descuento de stock.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.config import Settings
from artsign.core.enums import (
    CANCELLABLE_ORDER_STATUSES,
    AuditAction,
    OrderStatus,
    PaymentStatus,
    StockOperation,
)
from artsign.core.exceptions import BadRequestError, ConflictError, NotFoundError, UserNotFoundError
from artsign.core.utils import compute_totals, generate_document_number, to_money
from artsign.crud import invoice_crud, order_crud, product_crud, user_crud
from artsign.db.models.order_model import Order
from artsign.db.unit_of_work import unit_of_work
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.order_schema import OrderCreate, OrderFilter, OrderUpdate
from artsign.services.audit_service import AuditService
from artsign.services.product_service import ProductService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Servicio para la gestión de pedidos: creación con control de stock,
    cancelación con reposición, seguimiento y estados.
    """

    def __init__(self, settings: Settings, product_service: ProductService, audit_service: AuditService):
        self.settings = settings
        self.products = product_service
        self.audit = audit_service

    # ========================================
    # CONSULTAS
    # ========================================

    async def get_order_by_id(self, db: AsyncSession, order_id: str) -> Order:
        order = await order_crud.get_order(db, order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    async def get_order_by_number(self, db: AsyncSession, order_number: str) -> Order:
        order = await order_crud.get_order_by_number(db, order_number)
        if not order:
            raise NotFoundError("Order not found")
        return order

    async def get_orders(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        filters: Optional[OrderFilter] = None,
    ) -> Tuple[List[Order], int]:
        return await order_crud.get_orders(db, pagination, filters)

    async def get_user_orders(
        self, db: AsyncSession, user_id: str, pagination: PaginationParams
    ) -> Tuple[List[Order], int]:
        return await order_crud.get_orders(db, pagination, OrderFilter(user_id=user_id))

    # ========================================
    # CREACIÓN
    # ========================================

    async def create_order(self, db: AsyncSession, user_id: str, order_in: OrderCreate) -> Order:
        """
        Crea un pedido para `user_id` y descuenta el stock de los productos
        con control de inventario.

        Los precios unitarios son los enviados por el cliente; no se recalculan
        con el precio del catálogo.

        Raises:
            UserNotFoundError: el usuario no existe
            NotFoundError: algún producto no existe
            BadRequestError: stock insuficiente para algún producto
        """
        async with unit_of_work(db):
            if not await user_crud.get_user(db, user_id):
                raise UserNotFoundError()

            products = await product_crud.get_products_by_ids(db, [item.product_id for item in order_in.items])

            items_data: List[Dict] = []
            line_totals: List[Decimal] = []
            for item in order_in.items:
                product = products.get(item.product_id)
                if not product:
                    raise NotFoundError(f"Product {item.product_id} not found")
                if product.track_stock and product.current_stock < item.quantity:
                    raise BadRequestError(f"Insufficient stock for product {product.name}")

                unit_price = to_money(item.unit_price)
                total_price = to_money(unit_price * item.quantity)
                line_totals.append(total_price)
                items_data.append({
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                    "total_price": total_price,
                    "specifications": item.specifications,
                })

            shipping_cost = to_money(0)
            subtotal, tax_amount, total_amount = compute_totals(
                line_totals, self.settings.TAX_RATE, shipping_cost
            )

            order = await order_crud.create_order(
                db,
                {
                    "order_number": generate_document_number("ORD"),
                    "user_id": user_id,
                    "status": OrderStatus.PENDING_PAYMENT.value,
                    "payment_status": PaymentStatus.PENDING.value,
                    "subtotal": subtotal,
                    "tax_amount": tax_amount,
                    "shipping_cost": shipping_cost,
                    "total_amount": total_amount,
                    "shipping_method": order_in.shipping_method or self.settings.DEFAULT_SHIPPING_METHOD,
                    "shipping_address": order_in.shipping_address,
                    "billing_address": order_in.billing_address,
                    "notes": order_in.notes,
                    "stock_deducted": True,
                },
                items_data,
            )

            for item in order_in.items:
                if products[item.product_id].track_stock:
                    await self.products.adjust_stock(
                        db,
                        item.product_id,
                        item.quantity,
                        StockOperation.SUBTRACT,
                        product_name=products[item.product_id].name,
                    )

            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.CREATE,
                entity="Order",
                entity_id=order.id,
                changes={
                    "order_number": order.order_number,
                    "total_amount": total_amount,
                    "items": len(items_data),
                },
            )

        logger.info(f"🛒 PEDIDO: {order.order_number} creado para {user_id} (total {total_amount})")
        return await order_crud.get_order(db, order.id)

    # ========================================
    # CAMBIOS DE ESTADO
    # ========================================

    async def cancel_order(self, db: AsyncSession, order_id: str, user_id: Optional[str] = None) -> Order:
        """
        Cancela un pedido pendiente de pago o en proceso y repone el stock
        descontado de sus productos con control de inventario.

        Los pedidos que no descontaron stock al crearse (los convertidos desde
        una cotización) se cancelan sin tocar el inventario.
        """
        async with unit_of_work(db):
            order = await self.get_order_by_id(db, order_id)
            if order.status not in CANCELLABLE_ORDER_STATUSES:
                raise BadRequestError("Order cannot be cancelled in its current status")

            restored: Dict[str, int] = {}
            if order.stock_deducted:
                for item in order.items:
                    if item.product is not None and item.product.track_stock:
                        await self.products.adjust_stock(db, item.product_id, item.quantity, StockOperation.ADD)
                        restored[item.product_id] = restored.get(item.product_id, 0) + item.quantity

            previous_status = order.status
            await order_crud.update_order(
                db, order, {"status": OrderStatus.CANCELLED.value, "stock_deducted": False}
            )
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Order",
                entity_id=order.id,
                changes={
                    "status": {"from": previous_status, "to": OrderStatus.CANCELLED.value},
                    "restored_stock": restored,
                },
            )

        logger.info(f"❌ PEDIDO: {order.order_number} cancelado")
        return await order_crud.get_order(db, order_id)

    async def update_order_status(
        self, db: AsyncSession, order_id: str, status: OrderStatus, user_id: Optional[str] = None
    ) -> Order:
        return await self._set_fields(db, order_id, {"status": OrderStatus(status).value}, user_id)

    async def update_payment_status(
        self, db: AsyncSession, order_id: str, payment_status: PaymentStatus, user_id: Optional[str] = None
    ) -> Order:
        return await self._set_fields(
            db, order_id, {"payment_status": PaymentStatus(payment_status).value}, user_id
        )

    async def add_tracking_number(
        self, db: AsyncSession, order_id: str, tracking_number: str, user_id: Optional[str] = None
    ) -> Order:
        """Guarda el número de seguimiento; un pedido en PROCESSING pasa a IN_PROGRESS."""
        async with unit_of_work(db):
            order = await self.get_order_by_id(db, order_id)
            changes = {"tracking_number": tracking_number}
            if order.status == OrderStatus.PROCESSING.value:
                changes["status"] = OrderStatus.IN_PROGRESS.value

            await order_crud.update_order(db, order, changes)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Order",
                entity_id=order.id,
                changes=changes,
            )

        logger.info(f"🚚 PEDIDO: {order.order_number} con seguimiento {tracking_number}")
        return await order_crud.get_order(db, order_id)

    async def update_order(
        self, db: AsyncSession, order_id: str, order_in: OrderUpdate, user_id: Optional[str] = None
    ) -> Order:
        return await self._set_fields(db, order_id, order_in.model_dump(exclude_unset=True), user_id)

    async def delete_order(self, db: AsyncSession, order_id: str, user_id: Optional[str] = None) -> None:
        async with unit_of_work(db):
            order = await self.get_order_by_id(db, order_id)
            if await invoice_crud.get_invoice_by_order_id(db, order_id):
                raise ConflictError("Cannot delete an order that has an invoice")

            await order_crud.delete_order(db, order)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.DELETE,
                entity="Order",
                entity_id=order_id,
                changes={"order_number": order.order_number},
            )
        logger.info(f"🗑️ PEDIDO: {order.order_number} eliminado")

    async def _set_fields(self, db: AsyncSession, order_id: str, changes: dict, user_id: Optional[str]) -> Order:
        async with unit_of_work(db):
            order = await self.get_order_by_id(db, order_id)
            await order_crud.update_order(db, order, changes)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Order",
                entity_id=order.id,
                changes=changes,
            )
        return await order_crud.get_order(db, order_id)
