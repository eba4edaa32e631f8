# backend/artsign/schemas/invoice_schema.py
"""
Esquemas Pydantic para facturas (Invoice).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from artsign.core.enums import InvoiceStatus


class InvoiceCreate(BaseModel):
    order_id: str
    user_id: str
    amount: float = Field(..., ge=0)
    due_date: datetime


class InvoiceUpdate(BaseModel):
    amount: Optional[float] = Field(None, ge=0)
    status: Optional[InvoiceStatus] = None
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)


class MarkPaidRequest(BaseModel):
    paid_date: Optional[datetime] = None


class GenerateInvoiceRequest(BaseModel):
    due_date: Optional[datetime] = None


class InvoiceFilter(BaseModel):
    status: Optional[InvoiceStatus] = None
    user_id: Optional[str] = None
    order_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    overdue: Optional[bool] = None
    search: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class InvoiceResponse(BaseModel):
    id: str
    invoice_number: str
    order_id: str
    order_number: str = ""
    user_id: str
    customer_name: str = ""
    amount: float
    status: str
    due_date: datetime
    paid_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
