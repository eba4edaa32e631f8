# backend/artsign/api/v1/endpoints/customers.py

"""
Endpoints REST para perfiles de cliente.
"""

from typing import Optional
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.api import deps
from artsign.core.enums import CustomerStatus, CustomerType
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import ApiResponse, Paginated, PaginationParams, build_page
from artsign.schemas import customer_schema
from artsign.services.customer_service import CustomerService

logger = logging.getLogger(__name__)
router = APIRouter()

CustomerOut = customer_schema.CustomerResponse


@router.post("/", response_model=ApiResponse[CustomerOut], status_code=status.HTTP_201_CREATED)
async def create_customer(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    current_user: User = Depends(deps.get_current_user),
    customer_in: customer_schema.CustomerCreate,
):
    """
    Crea un perfil de cliente. Un usuario normal solo puede crear el suyo;
    los gestores pueden indicar cualquier user_id.
    """
    if customer_in.user_id:
        deps.ensure_self_or_manager(current_user, customer_in.user_id)
    customer = await service.create_customer(db, customer_in, created_by=current_user.id)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Customer created successfully")


@router.get("/me", response_model=ApiResponse[CustomerOut])
async def read_my_customer_profile(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    current_user: User = Depends(deps.get_current_user),
):
    customer = await service.get_customer_by_user_id(db, current_user.id)
    return ApiResponse(data=CustomerOut.model_validate(customer))


@router.put("/me", response_model=ApiResponse[CustomerOut])
async def update_my_customer_profile(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    current_user: User = Depends(deps.get_current_user),
    customer_in: customer_schema.CustomerSelfUpdate,
):
    customer = await service.update_customer_by_user_id(db, current_user.id, customer_in)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Profile updated successfully")


@router.get("/", response_model=ApiResponse[Paginated[CustomerOut]])
async def read_customers(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    _: User = Depends(deps.require_manager),
    pagination: PaginationParams = Depends(deps.get_pagination),
    customer_status: Optional[CustomerStatus] = None,
    customer_type: Optional[CustomerType] = None,
    min_credit_limit: Optional[float] = None,
    max_credit_limit: Optional[float] = None,
    min_total_spent: Optional[float] = None,
    max_total_spent: Optional[float] = None,
    salesman: Optional[str] = None,
):
    filters = customer_schema.CustomerFilter(
        customer_status=customer_status,
        customer_type=customer_type,
        min_credit_limit=min_credit_limit,
        max_credit_limit=max_credit_limit,
        min_total_spent=min_total_spent,
        max_total_spent=max_total_spent,
        salesman=salesman,
    )
    customers, total = await service.get_customers(db, pagination, filters)
    return ApiResponse(data=build_page(CustomerOut, customers, total, pagination))


@router.get("/user/{user_id}", response_model=ApiResponse[CustomerOut])
async def read_customer_by_user(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    _: User = Depends(deps.require_manager),
    user_id: str,
):
    customer = await service.get_customer_by_user_id(db, user_id)
    return ApiResponse(data=CustomerOut.model_validate(customer))


@router.get("/{customer_id}", response_model=ApiResponse[CustomerOut])
async def read_customer(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    current_user: User = Depends(deps.get_current_user),
    customer_id: str,
):
    customer = await service.get_customer_by_id(db, customer_id)
    deps.ensure_self_or_manager(current_user, customer.user_id)
    return ApiResponse(data=CustomerOut.model_validate(customer))


@router.put("/{customer_id}", response_model=ApiResponse[CustomerOut])
async def update_customer(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    current_user: User = Depends(deps.require_manager),
    customer_id: str,
    customer_in: customer_schema.CustomerUpdate,
):
    customer = await service.update_customer(db, customer_id, customer_in, user_id=current_user.id)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Customer updated successfully")


@router.delete("/{customer_id}", response_model=ApiResponse[None])
async def delete_customer(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: CustomerService = Depends(deps.get_customer_service),
    current_user: User = Depends(deps.require_super_admin),
    customer_id: str,
):
    await service.delete_customer(db, customer_id, user_id=current_user.id)
    return ApiResponse(message="Customer deleted successfully")
