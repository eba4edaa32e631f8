# backend/artsign/api/v1/endpoints/invoices.py

"""
Endpoints REST para facturas.
"""

from datetime import datetime
from typing import List, Optional
import logging

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.api import deps
from artsign.core.enums import InvoiceStatus
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import ApiResponse, Paginated, PaginationParams, build_page
from artsign.schemas import invoice_schema
from artsign.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)
router = APIRouter()

InvoiceOut = invoice_schema.InvoiceResponse


@router.get("/my-invoices", response_model=ApiResponse[Paginated[InvoiceOut]])
async def read_my_invoices(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.get_current_user),
    pagination: PaginationParams = Depends(deps.get_pagination),
):
    invoices, total = await service.get_user_invoices(db, current_user.id, pagination)
    return ApiResponse(data=build_page(InvoiceOut, invoices, total, pagination))


@router.post("/", response_model=ApiResponse[InvoiceOut], status_code=status.HTTP_201_CREATED)
async def create_invoice(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.require_manager),
    invoice_in: invoice_schema.InvoiceCreate,
):
    invoice = await service.create_invoice(db, invoice_in, created_by=current_user.id)
    return ApiResponse(data=InvoiceOut.model_validate(invoice), message="Invoice created successfully")


@router.get("/", response_model=ApiResponse[Paginated[InvoiceOut]])
async def read_invoices(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    _: User = Depends(deps.require_manager),
    pagination: PaginationParams = Depends(deps.get_pagination),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    user_id: Optional[str] = None,
    order_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    due_date_from: Optional[datetime] = None,
    due_date_to: Optional[datetime] = None,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
    overdue: Optional[bool] = None,
    search: Optional[str] = None,
):
    filters = invoice_schema.InvoiceFilter(
        status=status_filter,
        user_id=user_id,
        order_id=order_id,
        date_from=date_from,
        date_to=date_to,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        overdue=overdue,
        search=search,
    )
    invoices, total = await service.get_invoices(db, pagination, filters)
    return ApiResponse(data=build_page(InvoiceOut, invoices, total, pagination))


@router.get("/overdue", response_model=ApiResponse[List[InvoiceOut]])
async def read_overdue_invoices(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    _: User = Depends(deps.require_manager),
):
    invoices = await service.get_overdue_invoices(db)
    return ApiResponse(data=[InvoiceOut.model_validate(i) for i in invoices])


@router.get("/number/{invoice_number}", response_model=ApiResponse[InvoiceOut])
async def read_invoice_by_number(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    _: User = Depends(deps.require_manager),
    invoice_number: str,
):
    invoice = await service.get_invoice_by_number(db, invoice_number)
    return ApiResponse(data=InvoiceOut.model_validate(invoice))


@router.get("/order/{order_id}", response_model=ApiResponse[List[InvoiceOut]])
async def read_invoices_by_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    _: User = Depends(deps.require_manager),
    order_id: str,
):
    invoices = await service.get_invoices_by_order(db, order_id)
    return ApiResponse(data=[InvoiceOut.model_validate(i) for i in invoices])


@router.post(
    "/generate-from-order/{order_id}",
    response_model=ApiResponse[InvoiceOut],
    status_code=status.HTTP_201_CREATED,
)
async def generate_invoice_from_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.require_manager),
    order_id: str,
    request_in: Optional[invoice_schema.GenerateInvoiceRequest] = Body(None),
):
    due_date = request_in.due_date if request_in else None
    invoice = await service.generate_invoice_from_order(db, order_id, due_date=due_date, created_by=current_user.id)
    return ApiResponse(data=InvoiceOut.model_validate(invoice), message="Invoice generated successfully")


@router.get("/{invoice_id}", response_model=ApiResponse[InvoiceOut])
async def read_invoice(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.get_current_user),
    invoice_id: str,
):
    invoice = await service.get_invoice_by_id(db, invoice_id)
    deps.ensure_self_or_manager(current_user, invoice.user_id)
    return ApiResponse(data=InvoiceOut.model_validate(invoice))


@router.put("/{invoice_id}", response_model=ApiResponse[InvoiceOut])
async def update_invoice(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.require_manager),
    invoice_id: str,
    invoice_in: invoice_schema.InvoiceUpdate,
):
    invoice = await service.update_invoice(db, invoice_id, invoice_in, user_id=current_user.id)
    return ApiResponse(data=InvoiceOut.model_validate(invoice), message="Invoice updated successfully")


@router.patch("/{invoice_id}/mark-paid", response_model=ApiResponse[InvoiceOut])
async def mark_invoice_paid(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.require_manager),
    invoice_id: str,
    paid_in: Optional[invoice_schema.MarkPaidRequest] = Body(None),
):
    paid_date = paid_in.paid_date if paid_in else None
    invoice = await service.mark_as_paid(db, invoice_id, paid_date=paid_date, user_id=current_user.id)
    return ApiResponse(data=InvoiceOut.model_validate(invoice), message="Invoice marked as paid")


@router.patch("/{invoice_id}/mark-unpaid", response_model=ApiResponse[InvoiceOut])
async def mark_invoice_unpaid(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.require_manager),
    invoice_id: str,
):
    invoice = await service.mark_as_unpaid(db, invoice_id, user_id=current_user.id)
    return ApiResponse(data=InvoiceOut.model_validate(invoice), message="Invoice marked as unpaid")


@router.delete("/{invoice_id}", response_model=ApiResponse[None])
async def delete_invoice(
    *,
    db: AsyncSession = Depends(deps.get_db),
    service: InvoiceService = Depends(deps.get_invoice_service),
    current_user: User = Depends(deps.require_super_admin),
    invoice_id: str,
):
    await service.delete_invoice(db, invoice_id, user_id=current_user.id)
    return ApiResponse(message="Invoice deleted successfully")
