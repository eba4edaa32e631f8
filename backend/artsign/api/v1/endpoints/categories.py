# backend/artsign/api/v1/endpoints/categories.py

"""
Endpoints REST para categorías del catálogo.
"""

from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.api import deps
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import ApiResponse
from artsign.schemas import category_schema
from artsign.services.category_service import CategoryService

logger = logging.getLogger(__name__)
router = APIRouter()

CategoryOut = category_schema.CategoryResponse


@router.get("/", response_model=ApiResponse[List[CategoryOut]])
async def read_categories(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CategoryService = Depends(deps.get_category_service),
):
    """Lista todas las categorías."""
    categories = await service.get_categories(db)
    return ApiResponse(data=[CategoryOut.model_validate(c) for c in categories])


@router.get("/{category_id}", response_model=ApiResponse[CategoryOut])
async def read_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CategoryService = Depends(deps.get_category_service),
    category_id: str,
):
    category = await service.get_category_by_id(db, category_id)
    return ApiResponse(data=CategoryOut.model_validate(category))


@router.post("/", response_model=ApiResponse[CategoryOut], status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CategoryService = Depends(deps.get_category_service),
    current_user: User = Depends(deps.require_manager),
    category_in: category_schema.CategoryCreate,
):
    category = await service.create_category(db, category_in, user_id=current_user.id)
    return ApiResponse(data=CategoryOut.model_validate(category), message="Category created successfully")
