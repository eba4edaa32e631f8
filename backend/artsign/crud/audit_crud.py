# backend/artsign/crud/audit_crud.py
"""
Inserción de registros de auditoría. Nunca se actualizan ni se borran.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from artsign.db.models.audit_model import AuditLog


async def create_audit_log(
    db: AsyncSession,
    *,
    user_id: Optional[str],
    action: str,
    entity: str,
    entity_id: str,
    changes: Optional[str] = None,
) -> AuditLog:
    db_log = AuditLog(
        user_id=user_id,
        action=action,
        entity=entity,
        entity_id=entity_id,
        changes=changes,
    )
    db.add(db_log)
    await db.flush()
    return db_log
