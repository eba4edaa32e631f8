# backend/artsign/api/v1/endpoints/quotations.py

"""
Endpoints REST para cotizaciones.

Los clientes consultan, aceptan y rechazan sus propias cotizaciones; los
gestores las crean, envían, editan y convierten en pedidos.
"""

from datetime import datetime
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.api import deps
from artsign.core.enums import QuotationStatus
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import ApiResponse, Paginated, PaginationParams, build_page
from artsign.schemas import quotation_schema
from artsign.services.quotation_service import QuotationService

logger = logging.getLogger(__name__)
router = APIRouter()

QuotationOut = quotation_schema.QuotationResponse


@router.get("/my-quotations", response_model=ApiResponse[Paginated[QuotationOut]])
async def read_my_quotations(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.get_current_user),
    pagination: PaginationParams = Depends(deps.get_pagination),
):
    quotations, total = await service.get_user_quotations(db, current_user.id, pagination)
    return ApiResponse(data=build_page(QuotationOut, quotations, total, pagination))


@router.patch("/{quotation_id}/accept", response_model=ApiResponse[QuotationOut])
async def accept_quotation(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.get_current_user),
    quotation_id: str,
):
    quotation = await service.get_quotation_by_id(db, quotation_id)
    deps.ensure_self_or_manager(current_user, quotation.user_id)
    quotation = await service.accept_quotation(db, quotation_id, user_id=current_user.id)
    return ApiResponse(data=QuotationOut.model_validate(quotation), message="Quotation accepted successfully")


@router.patch("/{quotation_id}/reject", response_model=ApiResponse[QuotationOut])
async def reject_quotation(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.get_current_user),
    quotation_id: str,
):
    quotation = await service.get_quotation_by_id(db, quotation_id)
    deps.ensure_self_or_manager(current_user, quotation.user_id)
    quotation = await service.reject_quotation(db, quotation_id, user_id=current_user.id)
    return ApiResponse(data=QuotationOut.model_validate(quotation), message="Quotation rejected successfully")


@router.post("/", response_model=ApiResponse[QuotationOut], status_code=status.HTTP_201_CREATED)
async def create_quotation(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.require_manager),
    quotation_in: quotation_schema.QuotationCreate,
):
    quotation = await service.create_quotation(db, quotation_in, created_by=current_user.id)
    return ApiResponse(data=QuotationOut.model_validate(quotation), message="Quotation created successfully")


@router.get("/", response_model=ApiResponse[Paginated[QuotationOut]])
async def read_quotations(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    _: User = Depends(deps.require_manager),
    pagination: PaginationParams = Depends(deps.get_pagination),
    status_filter: Optional[QuotationStatus] = Query(None, alias="status"),
    user_id: Optional[str] = None,
    salesman: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
    search: Optional[str] = None,
):
    filters = quotation_schema.QuotationFilter(
        status=status_filter,
        user_id=user_id,
        salesman=salesman,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        search=search,
    )
    quotations, total = await service.get_quotations(db, pagination, filters)
    return ApiResponse(data=build_page(QuotationOut, quotations, total, pagination))


@router.get("/number/{quotation_number}", response_model=ApiResponse[QuotationOut])
async def read_quotation_by_number(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    _: User = Depends(deps.require_manager),
    quotation_number: str,
):
    quotation = await service.get_quotation_by_number(db, quotation_number)
    return ApiResponse(data=QuotationOut.model_validate(quotation))


@router.get("/{quotation_id}", response_model=ApiResponse[QuotationOut])
async def read_quotation(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.get_current_user),
    quotation_id: str,
):
    quotation = await service.get_quotation_by_id(db, quotation_id)
    deps.ensure_self_or_manager(current_user, quotation.user_id)
    return ApiResponse(data=QuotationOut.model_validate(quotation))


@router.put("/{quotation_id}", response_model=ApiResponse[QuotationOut])
async def update_quotation(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.require_manager),
    quotation_id: str,
    quotation_in: quotation_schema.QuotationUpdate,
):
    quotation = await service.update_quotation(db, quotation_id, quotation_in, user_id=current_user.id)
    return ApiResponse(data=QuotationOut.model_validate(quotation), message="Quotation updated successfully")


@router.patch("/{quotation_id}/status", response_model=ApiResponse[QuotationOut])
async def update_quotation_status(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.require_manager),
    quotation_id: str,
    status_in: quotation_schema.QuotationStatusUpdate,
):
    quotation = await service.update_quotation_status(db, quotation_id, status_in.status, user_id=current_user.id)
    return ApiResponse(data=QuotationOut.model_validate(quotation), message="Quotation status updated successfully")


@router.patch("/{quotation_id}/send", response_model=ApiResponse[QuotationOut])
async def send_quotation(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.require_manager),
    quotation_id: str,
):
    quotation = await service.send_quotation(db, quotation_id, user_id=current_user.id)
    return ApiResponse(data=QuotationOut.model_validate(quotation), message="Quotation sent successfully")


@router.post("/{quotation_id}/convert-to-order", response_model=ApiResponse[quotation_schema.ConvertToOrderResponse])
async def convert_to_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.require_manager),
    quotation_id: str,
):
    """Convierte una cotización aceptada y vigente en un pedido."""
    quotation, order_id = await service.convert_to_order(db, quotation_id, user_id=current_user.id)
    result = quotation_schema.ConvertToOrderResponse(
        quotation=QuotationOut.model_validate(quotation),
        order_id=order_id,
    )
    return ApiResponse(data=result, message="Quotation converted to order successfully")


@router.delete("/{quotation_id}", response_model=ApiResponse[None])
async def delete_quotation(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: QuotationService = Depends(deps.get_quotation_service),
    current_user: User = Depends(deps.require_super_admin),
    quotation_id: str,
):
    await service.delete_quotation(db, quotation_id, user_id=current_user.id)
    return ApiResponse(message="Quotation deleted successfully")
