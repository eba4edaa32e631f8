# backend/artsign/schemas/quotation_schema.py
"""
Esquemas Pydantic para cotizaciones (Quotation) y sus líneas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from artsign.core.enums import QuotationStatus


class QuotationItemBase(BaseModel):
    product_id: str
    description: Optional[str] = None
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    specifications: Optional[str] = None


class QuotationItemCreate(QuotationItemBase):
    pass


class QuotationItemResponse(QuotationItemBase):
    id: str
    total_price: float
    product_name: str = ""

    model_config = ConfigDict(from_attributes=True)


class QuotationCreate(BaseModel):
    """
    Esquema para crear una cotización en nombre de un cliente.
    Los importes se calculan en el servidor a partir de las líneas.
    """
    user_id: str = Field(..., description="Cliente al que se dirige la cotización")
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    salesman: Optional[str] = Field(None, max_length=255)
    valid_until: datetime
    notes: Optional[str] = None
    items: List[QuotationItemCreate] = Field(..., min_length=1)


class QuotationUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    salesman: Optional[str] = Field(None, max_length=255)
    valid_until: Optional[datetime] = None
    notes: Optional[str] = None
    status: Optional[QuotationStatus] = None

    model_config = ConfigDict(use_enum_values=True)


class QuotationStatusUpdate(BaseModel):
    status: QuotationStatus


class QuotationFilter(BaseModel):
    status: Optional[QuotationStatus] = None
    user_id: Optional[str] = None
    salesman: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    search: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class QuotationResponse(BaseModel):
    id: str
    quotation_number: str
    user_id: str
    customer_name: str = ""
    title: str
    description: Optional[str] = None
    salesman: Optional[str] = None
    valid_until: datetime
    subtotal: float
    tax_amount: float
    total_amount: float
    status: str
    notes: Optional[str] = None
    items: List[QuotationItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ConvertToOrderResponse(BaseModel):
    """Resultado de convertir una cotización aceptada en pedido."""
    quotation: QuotationResponse
    order_id: str
