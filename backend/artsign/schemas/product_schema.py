# backend/artsign/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.

Patrón de esquemas utilizado:
- ProductBase: Propiedades comunes compartidas
- ProductCreate: Para crear nuevos productos (POST)
- ProductUpdate: Para actualizaciones parciales (PUT)
- ProductResponse: Para respuestas de la API (GET)
"""

import json
from datetime import datetime
from typing import Optional, List, Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artsign.core.enums import PricingModel, ProductStatus, StockOperation, StockStatus


def _parse_json_field(value: Any) -> Any:
    """Permite recibir listas/objetos también como string JSON."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            raise ValueError("Invalid JSON string")
    return value


# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: str
    price: float = Field(..., ge=0)
    pricing_model: PricingModel = PricingModel.FIXED
    track_stock: bool = False
    current_stock: int = Field(0, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    featured: bool = False
    image_urls: List[str] = []
    specifications: Dict[str, Any] = {}
    features: List[str] = []
    color_options: List[str] = []
    size_options: List[str] = []


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un producto. Si no se indica SKU se genera uno."""
    sku: Optional[str] = Field(None, max_length=50)

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("image_urls", "specifications", "features", "color_options", "size_options", mode="before")
    @classmethod
    def parse_json_fields(cls, value):
        return _parse_json_field(value)


class ProductUpdate(BaseModel):
    """Esquema para actualizar un producto. Todos los campos son opcionales."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    pricing_model: Optional[PricingModel] = None
    track_stock: Optional[bool] = None
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    featured: Optional[bool] = None
    status: Optional[ProductStatus] = None
    image_urls: Optional[List[str]] = None
    specifications: Optional[Dict[str, Any]] = None
    features: Optional[List[str]] = None
    color_options: Optional[List[str]] = None
    size_options: Optional[List[str]] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("image_urls", "specifications", "features", "color_options", "size_options", mode="before")
    @classmethod
    def parse_json_fields(cls, value):
        if value is None:
            return None
        return _parse_json_field(value)


class StockUpdate(BaseModel):
    """Esquema para modificar el inventario de un producto."""
    quantity: int = Field(..., ge=0)
    operation: StockOperation


class ProductFilter(BaseModel):
    """Filtros de listado de productos."""
    category_id: Optional[str] = None
    status: Optional[ProductStatus] = None
    featured: Optional[bool] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    in_stock: Optional[bool] = None
    search: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class ProductResponse(BaseModel):
    """Esquema de respuesta para un producto, con el nombre de su categoría."""
    id: str
    sku: str
    name: str
    description: Optional[str] = None
    category_id: str
    category_name: str = ""
    price: float
    pricing_model: str
    track_stock: bool
    current_stock: int
    low_stock_threshold: int
    stock_status: StockStatus
    featured: bool
    status: str
    image_urls: List[str] = []
    specifications: Dict[str, Any] = {}
    features: List[str] = []
    color_options: List[str] = []
    size_options: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
