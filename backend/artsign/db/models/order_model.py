# backend/artsign/db/models/order_model.py
"""
Este archivo contiene el modelo de pedido para la aplicación.
"""

import uuid

from sqlalchemy import (
    Column, Boolean, Integer, String, DateTime, Numeric, ForeignKey, Text
)
from sqlalchemy.orm import relationship

from artsign.core.enums import OrderStatus, PaymentStatus
from artsign.core.utils import utcnow
from artsign.db.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(30), nullable=False, default=OrderStatus.PENDING_PAYMENT.value)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_cost = Column(Numeric(12, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_method = Column(String(50), nullable=False, default="STANDARD")
    shipping_address = Column(Text, nullable=True)
    billing_address = Column(Text, nullable=True)
    tracking_number = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    # True si la creación descontó stock; la cancelación solo repone en ese caso
    stock_deducted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    user = relationship("User")

    @property
    def customer_name(self) -> str:
        return self.user.full_name if self.user else ""

    def __repr__(self):
        return f"<Order(id={self.id}, number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    specifications = Column(Text, nullable=True)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    @property
    def product_name(self) -> str:
        return self.product.name if self.product else ""

    def __repr__(self):
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, product_id='{self.product_id}')>"
