# backend/artsign/db/models/product_model.py
"""
Modelo de producto del catálogo de impresión y rotulación.

Las listas y objetos (imágenes, especificaciones, características, opciones
de color y tamaño) se guardan en columnas JSON y llegan a la aplicación ya
decodificados como list/dict.
"""

import uuid

from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from artsign.core.enums import PricingModel, ProductStatus, StockStatus
from artsign.core.utils import utcnow
from artsign.db.database import Base, JSONType


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sku = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)  # Indexado para búsquedas rápidas
    description = Column(Text, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)  # Precisión decimal para precios
    pricing_model = Column(String(30), nullable=False, default=PricingModel.FIXED.value)
    track_stock = Column(Boolean, nullable=False, default=False)
    current_stock = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=10)
    featured = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=ProductStatus.ACTIVE.value)

    image_urls = Column(JSONType, nullable=False, default=list)
    specifications = Column(JSONType, nullable=False, default=dict)
    features = Column(JSONType, nullable=False, default=list)
    color_options = Column(JSONType, nullable=False, default=list)
    size_options = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    category = relationship("Category", back_populates="products")

    __table_args__ = (
        # El stock nunca puede quedar negativo
        CheckConstraint("current_stock >= 0", name="ck_products_current_stock_non_negative"),
    )

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else ""

    @property
    def stock_status(self) -> StockStatus:
        """Nivel de inventario derivado (solo tiene sentido con track_stock)."""
        if not self.track_stock:
            return StockStatus.IN_STOCK
        if self.current_stock <= 0:
            return StockStatus.OUT_OF_STOCK
        if self.current_stock <= self.low_stock_threshold:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def __repr__(self):
        return f"<Product(id={self.id}, sku='{self.sku}', stock={self.current_stock})>"
