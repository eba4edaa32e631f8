# backend/artsign/db/models/customer_model.py
"""
Se encarga de definir el modelo de cliente (perfil comercial de un usuario).
"""

import uuid

from sqlalchemy import Column, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from artsign.core.enums import CustomerType, CustomerStatus, PaymentTerms
from artsign.core.utils import utcnow
from artsign.db.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Un perfil de cliente por usuario
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    company_name = Column(String(255), nullable=True)
    tax_id = Column(String(50), nullable=True)
    customer_type = Column(String(20), nullable=False, default=CustomerType.INDIVIDUAL.value)
    credit_limit = Column(Numeric(12, 2), nullable=False, default=0)
    credit_used = Column(Numeric(12, 2), nullable=False, default=0)
    total_spent = Column(Numeric(12, 2), nullable=False, default=0)
    payment_terms = Column(String(20), nullable=False, default=PaymentTerms.IMMEDIATE.value)
    contact_person = Column(String(255), nullable=True)
    salesman = Column(String(255), nullable=True)
    customer_status = Column(String(20), nullable=False, default=CustomerStatus.ACTIVE.value)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, user_id='{self.user_id}', status='{self.customer_status}')>"
