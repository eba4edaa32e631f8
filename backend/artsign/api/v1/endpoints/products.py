# backend/artsign/api/v1/endpoints/products.py

"""
Endpoints REST para el catálogo de productos.

Lectura pública; alta, edición y ajuste de stock para gestores; borrado
solo para super administradores.
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.api import deps
from artsign.core.enums import ProductStatus
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import ApiResponse, Paginated, PaginationParams, build_page
from artsign.schemas import product_schema
from artsign.services.product_service import ProductService

logger = logging.getLogger(__name__)
router = APIRouter()

ProductOut = product_schema.ProductResponse


@router.get("/", response_model=ApiResponse[Paginated[ProductOut]])
async def read_products(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    pagination: PaginationParams = Depends(deps.get_pagination),
    category_id: Optional[str] = None,
    status_filter: Optional[ProductStatus] = Query(None, alias="status"),
    featured: Optional[bool] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    in_stock: Optional[bool] = None,
    search: Optional[str] = None,
):
    """Lista productos con filtros y paginación."""
    filters = product_schema.ProductFilter(
        category_id=category_id,
        status=status_filter,
        featured=featured,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        search=search,
    )
    products, total = await service.get_products(db, pagination, filters)
    return ApiResponse(data=build_page(ProductOut, products, total, pagination))


@router.get("/featured", response_model=ApiResponse[List[ProductOut]])
async def read_featured_products(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    limit: int = Query(10, ge=1, le=50),
):
    products = await service.get_featured_products(db, limit=limit)
    return ApiResponse(data=[ProductOut.model_validate(p) for p in products])


@router.get("/search", response_model=ApiResponse[Paginated[ProductOut]])
async def search_products(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    pagination: PaginationParams = Depends(deps.get_pagination),
    q: str = Query(..., min_length=1, description="Texto a buscar"),
):
    logger.info(f"🔍 BÚSQUEDA: '{q}'")
    products, total = await service.search_products(db, q, pagination)
    return ApiResponse(data=build_page(ProductOut, products, total, pagination))


@router.get("/low-stock", response_model=ApiResponse[List[ProductOut]])
async def read_low_stock_products(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    _: User = Depends(deps.require_manager),
):
    products = await service.check_low_stock(db)
    return ApiResponse(data=[ProductOut.model_validate(p) for p in products])


@router.get("/category/{category_id}", response_model=ApiResponse[Paginated[ProductOut]])
async def read_products_by_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    pagination: PaginationParams = Depends(deps.get_pagination),
    category_id: str,
):
    products, total = await service.get_products_by_category(db, category_id, pagination)
    return ApiResponse(data=build_page(ProductOut, products, total, pagination))


@router.get("/{product_id}", response_model=ApiResponse[ProductOut])
async def read_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    product_id: str,
):
    product = await service.get_product_by_id(db, product_id)
    return ApiResponse(data=ProductOut.model_validate(product))


@router.post("/", response_model=ApiResponse[ProductOut], status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    current_user: User = Depends(deps.require_manager),
    product_in: product_schema.ProductCreate,
):
    """Crea un nuevo producto en el catálogo."""
    product = await service.create_product(db, product_in, user_id=current_user.id)
    return ApiResponse(data=ProductOut.model_validate(product), message="Product created successfully")


@router.put("/{product_id}", response_model=ApiResponse[ProductOut])
async def update_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    current_user: User = Depends(deps.require_manager),
    product_id: str,
    product_in: product_schema.ProductUpdate,
):
    product = await service.update_product(db, product_id, product_in, user_id=current_user.id)
    return ApiResponse(data=ProductOut.model_validate(product), message="Product updated successfully")


@router.patch("/{product_id}/stock", response_model=ApiResponse[ProductOut])
async def update_product_stock(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    current_user: User = Depends(deps.require_manager),
    product_id: str,
    stock_in: product_schema.StockUpdate,
):
    """Ajusta el stock: add, subtract o set."""
    product = await service.update_product_stock(
        db, product_id, stock_in.quantity, stock_in.operation, user_id=current_user.id
    )
    return ApiResponse(data=ProductOut.model_validate(product), message="Stock updated successfully")


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: ProductService = Depends(deps.get_product_service),
    current_user: User = Depends(deps.require_super_admin),
    product_id: str,
):
    await service.delete_product(db, product_id, user_id=current_user.id)
    return ApiResponse(message="Product deleted successfully")
