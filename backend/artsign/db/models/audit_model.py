# backend/artsign/db/models/audit_model.py
"""
Registro de auditoría de solo inserción.
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime

from artsign.core.utils import utcnow
from artsign.db.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Sin FK: el registro debe sobrevivir al borrado del usuario
    user_id = Column(String(36), nullable=True, index=True)
    action = Column(String(20), nullable=False)
    entity = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(36), nullable=False)
    changes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
