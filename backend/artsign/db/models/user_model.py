# backend/artsign/db/models/user_model.py
"""
Modelo de usuario.

Los usuarios se gestionan fuera de este servicio (registro y emisión de
tokens); aquí solo se leen para identificar al propietario de pedidos,
cotizaciones, facturas y perfiles de cliente.
"""

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from artsign.core.enums import UserRole, UserStatus
from artsign.core.utils import utcnow
from artsign.db.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    status = Column(String(30), nullable=False, default=UserStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    customer = relationship("Customer", back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
