# backend/artsign/services/audit_service.py
"""
Servicio de auditoría.

Cada operación de escritura de los demás servicios deja un registro en
audit_logs dentro de la misma unidad de trabajo: si la operación se revierte,
su registro de auditoría también.
"""

import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.enums import AuditAction
from artsign.crud import audit_crud
from artsign.db.models.audit_model import AuditLog

logger = logging.getLogger(__name__)


class AuditService:
    """Registra acciones sobre entidades de negocio (solo inserción)."""

    async def log(
        self,
        db: AsyncSession,
        *,
        user_id: Optional[str],
        action: AuditAction,
        entity: str,
        entity_id: str,
        changes: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """
        Añade un registro de auditoría a la sesión.

        Args:
            db: sesión de la unidad de trabajo en curso
            user_id: usuario que ejecuta la acción (None para tareas del sistema)
            action: CREATE, UPDATE, DELETE...
            entity: nombre de la entidad afectada ("Order", "Invoice"...)
            entity_id: ID de la entidad afectada
            changes: datos relevantes, serializados a JSON
        """
        serialized = json.dumps(changes, default=str) if changes is not None else None
        entry = await audit_crud.create_audit_log(
            db,
            user_id=user_id,
            action=AuditAction(action).value,
            entity=entity,
            entity_id=entity_id,
            changes=serialized,
        )
        logger.debug(f"📝 AUDIT: {entry.action} {entity} {entity_id} por {user_id}")
        return entry
