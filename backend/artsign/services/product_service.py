# backend/artsign/services/product_service.py

"""
Capa de servicios para operaciones de negocio relacionadas con productos.

Esta capa orquesta las operaciones CRUD del catálogo, aplica las reglas de
negocio (SKU único, categoría existente) y es el único punto de entrada
para modificar el inventario: tanto el endpoint de stock como la creación y
cancelación de pedidos pasan por `adjust_stock`.

Características del dominio de productos:
- SKU único, generado como PRD-<unixMillis> si no se indica
- Stock controlado solo cuando track_stock está activo
- Especificaciones, imágenes y opciones en columnas JSON
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.config import Settings
from artsign.core.enums import AuditAction, ProductStatus, StockOperation
from artsign.core.exceptions import BadRequestError, ConflictError, NotFoundError
from artsign.core.utils import to_money
from artsign.crud import category_crud, product_crud
from artsign.db.models.product_model import Product
from artsign.db.unit_of_work import unit_of_work
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.product_schema import ProductCreate, ProductFilter, ProductUpdate
from artsign.services.audit_service import AuditService

# Configurar logger
logger = logging.getLogger(__name__)


class ProductService:
    """
    Servicio para operaciones de negocio relacionadas con productos.

    Encapsula la validación de categorías y SKUs, el cálculo del estado de
    inventario y la modificación atómica del stock.
    """

    def __init__(self, settings: Settings, audit_service: AuditService):
        self.settings = settings
        self.audit = audit_service

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_product_by_id(self, db: AsyncSession, product_id: str) -> Product:
        product = await product_crud.get_product(db, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    async def get_products(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        filters: Optional[ProductFilter] = None,
    ) -> Tuple[List[Product], int]:
        if filters and filters.min_price is not None and filters.max_price is not None:
            if filters.min_price > filters.max_price:
                raise BadRequestError("min_price cannot be greater than max_price")
        return await product_crud.get_products(db, pagination, filters)

    async def get_featured_products(self, db: AsyncSession, limit: int = 10) -> List[Product]:
        return await product_crud.get_featured_products(db, limit=limit)

    async def get_products_by_category(
        self, db: AsyncSession, category_id: str, pagination: PaginationParams
    ) -> Tuple[List[Product], int]:
        if not await category_crud.get_category(db, category_id):
            raise NotFoundError("Category not found")
        return await product_crud.get_products(db, pagination, ProductFilter(category_id=category_id))

    async def search_products(
        self, db: AsyncSession, query: str, pagination: PaginationParams
    ) -> Tuple[List[Product], int]:
        """Búsqueda por nombre, descripción o SKU entre los productos activos."""
        if not query or not query.strip():
            raise BadRequestError("Search query is required")
        filters = ProductFilter(search=query.strip(), status=ProductStatus.ACTIVE)
        return await product_crud.get_products(db, pagination, filters)

    async def check_low_stock(self, db: AsyncSession) -> List[Product]:
        """Productos con control de stock en o por debajo de su umbral."""
        products = await product_crud.get_low_stock_products(db)
        if products:
            logger.warning(f"📉 STOCK BAJO: {len(products)} productos por debajo del umbral")
        return products

    # ========================================
    # OPERACIONES DE ESCRITURA
    # ========================================

    async def create_product(
        self, db: AsyncSession, product_in: ProductCreate, user_id: Optional[str] = None
    ) -> Product:
        """
        Crea un producto validando la categoría y la unicidad del SKU.
        """
        async with unit_of_work(db):
            if not await category_crud.get_category(db, product_in.category_id):
                raise NotFoundError("Category not found")

            sku = product_in.sku or f"PRD-{int(time.time() * 1000)}"
            if await product_crud.get_product_by_sku(db, sku):
                raise ConflictError(f"Product with SKU '{sku}' already exists")

            product_data: Dict[str, Any] = product_in.model_dump(exclude={"sku"})
            product_data["sku"] = sku
            product_data["price"] = to_money(product_in.price)
            if product_data.get("low_stock_threshold") is None:
                product_data["low_stock_threshold"] = self.settings.LOW_STOCK_THRESHOLD

            try:
                product = await product_crud.create_product(db, product_data)
            except IntegrityError:
                raise ConflictError(f"Product with SKU '{sku}' already exists")

            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.CREATE,
                entity="Product",
                entity_id=product.id,
                changes={"sku": sku, "name": product.name, "price": product_data["price"]},
            )

        logger.info(f"🆕 PRODUCTO: creado {sku} - {product.name}")
        return await product_crud.get_product(db, product.id)

    async def update_product(
        self,
        db: AsyncSession,
        product_id: str,
        product_in: ProductUpdate,
        user_id: Optional[str] = None,
    ) -> Product:
        async with unit_of_work(db):
            product = await self.get_product_by_id(db, product_id)
            update_data = product_in.model_dump(exclude_unset=True)

            if update_data.get("category_id") and update_data["category_id"] != product.category_id:
                if not await category_crud.get_category(db, update_data["category_id"]):
                    raise NotFoundError("Category not found")
            if update_data.get("price") is not None:
                update_data["price"] = to_money(update_data["price"])

            await product_crud.update_product(db, product, update_data)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Product",
                entity_id=product.id,
                changes=update_data,
            )

        logger.info(f"✏️ PRODUCTO: actualizado {product.sku}")
        return await product_crud.get_product(db, product_id)

    async def delete_product(self, db: AsyncSession, product_id: str, user_id: Optional[str] = None) -> None:
        async with unit_of_work(db):
            product = await self.get_product_by_id(db, product_id)
            try:
                await product_crud.delete_product(db, product)
            except IntegrityError:
                raise ConflictError("Product is referenced by existing orders or quotations")
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.DELETE,
                entity="Product",
                entity_id=product_id,
                changes={"sku": product.sku},
            )

        logger.info(f"🗑️ PRODUCTO: eliminado {product.sku}")

    # ========================================
    # GESTIÓN DE INVENTARIO
    # ========================================

    async def adjust_stock(
        self,
        db: AsyncSession,
        product_id: str,
        quantity: int,
        operation: StockOperation,
        product_name: Optional[str] = None,
    ) -> None:
        """
        Único punto de modificación del stock.

        No abre transacción propia: se ejecuta dentro de la unidad de trabajo
        del llamador (pedido, cancelación o ajuste manual). `product_name` solo
        se usa en el mensaje de stock insuficiente.
        """
        operation = StockOperation(operation)
        if quantity < 0:
            raise BadRequestError("Quantity must be a non-negative number")

        updated = await product_crud.adjust_stock(db, product_id, quantity, operation)
        if not updated:
            if operation == StockOperation.SUBTRACT:
                if product_name is None:
                    product = await product_crud.get_product(db, product_id)
                    product_name = product.name if product else product_id
                raise BadRequestError(f"Insufficient stock for product {product_name}")
            raise NotFoundError("Product not found")

    async def update_product_stock(
        self,
        db: AsyncSession,
        product_id: str,
        quantity: int,
        operation: StockOperation,
        user_id: Optional[str] = None,
    ) -> Product:
        """
        Ajuste manual de inventario: add, subtract o set.
        Falla si el producto no controla stock o si la resta lo dejaría negativo.
        """
        operation = StockOperation(operation)
        async with unit_of_work(db):
            product = await self.get_product_by_id(db, product_id)
            if not product.track_stock:
                raise BadRequestError("Stock tracking is not enabled for this product")

            previous_stock = product.current_stock
            await self.adjust_stock(db, product_id, quantity, operation, product_name=product.name)
            await self.audit.log(
                db,
                user_id=user_id,
                action=AuditAction.UPDATE,
                entity="Product",
                entity_id=product_id,
                changes={
                    "stock": {
                        "operation": operation.value,
                        "quantity": quantity,
                        "previous": previous_stock,
                    }
                },
            )

        product = await product_crud.get_product(db, product_id)
        logger.info(
            f"📦 STOCK: {product.sku} {operation.value} {quantity} "
            f"({previous_stock} -> {product.current_stock})"
        )
        return product
