# backend/artsign/schemas/customer_schema.py
"""
Esquemas Pydantic para el perfil comercial de cliente (Customer).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from artsign.core.enums import CustomerStatus, CustomerType, PaymentTerms


class CustomerBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de cliente."""
    company_name: Optional[str] = Field(None, max_length=255)
    tax_id: Optional[str] = Field(None, max_length=50)
    customer_type: CustomerType = CustomerType.INDIVIDUAL
    credit_limit: float = Field(0, ge=0)
    payment_terms: PaymentTerms = PaymentTerms.IMMEDIATE
    contact_person: Optional[str] = Field(None, max_length=255)
    salesman: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class CustomerCreate(CustomerBase):
    """
    Esquema para crear un perfil de cliente.
    Si no se indica user_id, se usa el del usuario autenticado.
    """
    user_id: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class CustomerUpdate(BaseModel):
    """Actualización completa (gestores). Todos los campos son opcionales."""
    company_name: Optional[str] = Field(None, max_length=255)
    tax_id: Optional[str] = Field(None, max_length=50)
    customer_type: Optional[CustomerType] = None
    credit_limit: Optional[float] = Field(None, ge=0)
    payment_terms: Optional[PaymentTerms] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    salesman: Optional[str] = Field(None, max_length=255)
    customer_status: Optional[CustomerStatus] = None
    notes: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class CustomerSelfUpdate(BaseModel):
    """Campos que el propio cliente puede modificar de su perfil."""
    company_name: Optional[str] = Field(None, max_length=255)
    tax_id: Optional[str] = Field(None, max_length=50)
    contact_person: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class CustomerFilter(BaseModel):
    customer_status: Optional[CustomerStatus] = None
    customer_type: Optional[CustomerType] = None
    min_credit_limit: Optional[float] = None
    max_credit_limit: Optional[float] = None
    min_total_spent: Optional[float] = None
    max_total_spent: Optional[float] = None
    salesman: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class CustomerResponse(BaseModel):
    id: str
    user_id: str
    company_name: Optional[str] = None
    tax_id: Optional[str] = None
    customer_type: str
    credit_limit: float
    credit_used: float
    total_spent: float
    payment_terms: str
    contact_person: Optional[str] = None
    salesman: Optional[str] = None
    customer_status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
