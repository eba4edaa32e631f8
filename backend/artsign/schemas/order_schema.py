# backend/artsign/schemas/order_schema.py
"""
Se encarga de definir los esquemas Pydantic para los modelos Order y OrderItem.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artsign.core.enums import OrderStatus, PaymentStatus


class OrderItemBase(BaseModel):
    """Propiedades base para un item dentro de un pedido."""
    product_id: str = Field(..., description="ID del producto")
    quantity: int = Field(..., description="Cantidad del producto", gt=0)
    unit_price: float = Field(..., description="Precio unitario acordado", ge=0)
    specifications: Optional[str] = Field(None, description="Especificaciones de impresión")


class OrderItemCreate(OrderItemBase):
    pass


class OrderItemResponse(OrderItemBase):
    """Item de pedido con su total de línea y el nombre del producto."""
    id: str
    total_price: float
    product_name: str = ""

    model_config = ConfigDict(from_attributes=True)


class OrderCreate(BaseModel):
    """
    Esquema para crear un pedido. El propietario es siempre el usuario
    autenticado; los importes se calculan en el servidor.
    """
    items: List[OrderItemCreate] = Field(..., description="Items del pedido", min_length=1)
    shipping_method: Optional[str] = Field(None, max_length=50)
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("shipping_address", "billing_address")
    @classmethod
    def strip_address(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderUpdate(BaseModel):
    """Actualización general de un pedido (gestores)."""
    shipping_method: Optional[str] = Field(None, max_length=50)
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    tracking_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None

    model_config = ConfigDict(use_enum_values=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class TrackingNumberUpdate(BaseModel):
    tracking_number: str = Field(..., min_length=1, max_length=100)


class OrderFilter(BaseModel):
    """Filtros de listado de pedidos."""
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    user_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    search: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class OrderResponse(BaseModel):
    """Esquema completo de respuesta para un pedido."""
    id: str
    order_number: str
    user_id: str
    customer_name: str = ""
    status: str
    payment_status: str
    subtotal: float
    tax_amount: float
    shipping_cost: float
    total_amount: float
    shipping_method: str
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
