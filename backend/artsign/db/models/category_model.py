# backend/artsign/db/models/category_model.py
"""
Se encarga de definir los modelos de categoría para la aplicación.
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship

from artsign.core.utils import utcnow
from artsign.db.database import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    products = relationship("Product", back_populates="category")
