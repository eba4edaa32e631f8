# backend/artsign/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product.

Este módulo implementa las operaciones de Create, Read, Update, Delete para productos,
siendo el corazón del catálogo. Las funciones de escritura no hacen commit: la
transacción la controla el servicio con su unidad de trabajo.

Estrategias implementadas:
- selectinload() para cargar la categoría sin consultas N+1
- Filtros combinables para búsquedas flexibles
- Actualización de stock condicional en una sola sentencia UPDATE
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from artsign.core.enums import ProductStatus, StockOperation
from artsign.crud.pagination import paginate
from artsign.db.models.product_model import Product
from artsign.schemas.common_schema import PaginationParams
from artsign.schemas.product_schema import ProductFilter

import logging

logger = logging.getLogger(__name__)

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product(db: AsyncSession, product_id: str) -> Optional[Product]:
    """Obtiene un producto por su ID, con la categoría precargada."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category))
        .filter(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_product_by_sku(db: AsyncSession, sku: str) -> Optional[Product]:
    result = await db.execute(
        select(Product).options(selectinload(Product.category)).filter(Product.sku == sku)
    )
    return result.scalars().first()


async def get_products_by_ids(db: AsyncSession, product_ids: List[str]) -> Dict[str, Product]:
    """Devuelve un diccionario {id: producto} con los productos encontrados."""
    if not product_ids:
        return {}
    result = await db.execute(select(Product).filter(Product.id.in_(set(product_ids))))
    return {product.id: product for product in result.scalars().all()}


async def get_products(
    db: AsyncSession,
    pagination: PaginationParams,
    filters: Optional[ProductFilter] = None,
) -> Tuple[List[Product], int]:
    """
    Obtiene una lista filtrada y paginada de productos.
    """
    query = select(Product).options(selectinload(Product.category))
    filters = filters or ProductFilter()

    if filters.category_id:
        query = query.filter(Product.category_id == filters.category_id)
    if filters.status:
        query = query.filter(Product.status == filters.status)
    if filters.featured is not None:
        query = query.filter(Product.featured == filters.featured)
    if filters.min_price is not None:
        query = query.filter(Product.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.filter(Product.price <= filters.max_price)
    if filters.in_stock is True:
        query = query.filter(or_(Product.track_stock.is_(False), Product.current_stock > 0))
    elif filters.in_stock is False:
        query = query.filter(Product.track_stock.is_(True), Product.current_stock <= 0)
    if filters.search:
        term = f"%{filters.search}%"
        query = query.filter(
            or_(
                Product.name.ilike(term),
                Product.description.ilike(term),
                Product.sku.ilike(term),
            )
        )

    return await paginate(db, query, Product, pagination)


async def get_featured_products(db: AsyncSession, limit: int = 10) -> List[Product]:
    """Productos destacados y activos, los más recientes primero."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category))
        .filter(Product.featured.is_(True), Product.status == ProductStatus.ACTIVE.value)
        .order_by(Product.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_low_stock_products(db: AsyncSession) -> List[Product]:
    """Productos con control de stock en o por debajo de su umbral."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category))
        .filter(
            Product.track_stock.is_(True),
            Product.current_stock <= Product.low_stock_threshold,
        )
        .order_by(Product.current_stock.asc())
    )
    return list(result.scalars().all())


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_product(db: AsyncSession, product_data: Dict[str, Any]) -> Product:
    """Añade un producto a la sesión y obtiene su ID (flush, sin commit)."""
    db_product = Product(**product_data)
    db.add(db_product)
    await db.flush()
    return db_product


async def update_product(db: AsyncSession, db_product: Product, update_data: Dict[str, Any]) -> Product:
    for key, value in update_data.items():
        setattr(db_product, key, value)
    await db.flush()
    return db_product


async def delete_product(db: AsyncSession, db_product: Product) -> None:
    await db.delete(db_product)
    await db.flush()


async def adjust_stock(
    db: AsyncSession,
    product_id: str,
    quantity: int,
    operation: StockOperation,
) -> bool:
    """
    Modifica el stock de un producto con una única sentencia UPDATE.

    Para 'subtract' la condición `current_stock >= quantity` va en el WHERE,
    de modo que dos descuentos concurrentes nunca dejan el stock negativo.
    Devuelve False si ninguna fila cumplió la condición.
    """
    stmt = update(Product).where(Product.id == product_id)

    if operation == StockOperation.ADD:
        stmt = stmt.values(current_stock=Product.current_stock + quantity)
    elif operation == StockOperation.SUBTRACT:
        stmt = stmt.where(Product.current_stock >= quantity).values(
            current_stock=Product.current_stock - quantity
        )
    else:
        stmt = stmt.values(current_stock=quantity)

    # Sin sincronizar la sesión: quien necesite el valor nuevo vuelve a leer el producto
    result = await db.execute(stmt.execution_options(synchronize_session=False))
    updated = result.rowcount > 0
    if not updated:
        logger.warning(f"⚠️ STOCK: sin cambios para producto {product_id} ({operation.value} {quantity})")
    return updated
