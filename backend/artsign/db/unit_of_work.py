# backend/artsign/db/unit_of_work.py
"""
Unidad de trabajo para los casos de uso que escriben en varias tablas.

Todas las escrituras de un flujo (pedido + items + stock + auditoría,
cancelación + reposición de stock, conversión de cotización) se ejecutan
dentro de `unit_of_work(db)`: se confirma una sola vez al final y, ante
cualquier excepción, se revierte todo.

Tras un rollback la sesión expira todas sus instancias. Quien siga usando la
misma sesión debe volver a leer las entidades o guardar antes sus IDs: leer
un atributo expirado fuera de un contexto await lanza MissingGreenlet.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    try:
        yield db
        await db.commit()
    except Exception:
        logger.debug("↩️ Revirtiendo unidad de trabajo")
        await db.rollback()
        raise
