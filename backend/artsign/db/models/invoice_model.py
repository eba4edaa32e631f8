# backend/artsign/db/models/invoice_model.py
"""
Modelo de facturas. Una factura por pedido (restricción UNIQUE en order_id).
"""

import uuid

from sqlalchemy import Column, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from artsign.core.enums import InvoiceStatus
from artsign.core.utils import utcnow
from artsign.db.database import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="RESTRICT"), unique=True, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default=InvoiceStatus.UNPAID.value, index=True)
    due_date = Column(DateTime(timezone=True), nullable=False)
    paid_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    order = relationship("Order")
    user = relationship("User")

    @property
    def order_number(self) -> str:
        return self.order.order_number if self.order else ""

    @property
    def customer_name(self) -> str:
        return self.user.full_name if self.user else ""

    def __repr__(self):
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', status='{self.status}')>"
