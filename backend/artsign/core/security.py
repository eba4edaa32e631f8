# backend/artsign/core/security.py
"""
Verificación de tokens de acceso (JWT HS256).

Los tokens los emite el servicio de autenticación; aquí solo se valida la
firma y la expiración y se extrae el ID de usuario del claim `sub`.
"""

import logging
from typing import Optional

from jose import JWTError, jwt

from artsign.core.config import settings

logger = logging.getLogger(__name__)


def verify_access_token(token: str) -> Optional[str]:
    """Devuelve el ID de usuario del token, o None si no es válido."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"🔒 Token rechazado: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return str(user_id)
