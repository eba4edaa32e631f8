# backend/artsign/core/exceptions.py
"""
Excepciones de negocio de la aplicación.

La capa de servicios lanza estas excepciones cuando se viola una regla de
negocio o no existe una entidad. Cada excepción lleva el código HTTP y un
código de error legible por máquina; los manejadores registrados en
main.py las traducen a la respuesta estándar `{success, message, code}`.
"""

import enum
from typing import Any, Optional


class ErrorCode(str, enum.Enum):
    """Códigos de error legibles por máquina."""
    NOT_FOUND = "NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CONFLICT = "CONFLICT"
    BAD_REQUEST = "BAD_REQUEST"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(Exception):
    """Error base con código HTTP y código de error."""

    status_code: int = 500
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"success": False, "message": self.message, "code": self.code.value}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class NotFoundError(ApiError):
    status_code = 404
    code = ErrorCode.NOT_FOUND


class UserNotFoundError(NotFoundError):
    code = ErrorCode.USER_NOT_FOUND

    def __init__(self, message: str = "User not found", details: Optional[Any] = None):
        super().__init__(message, details)


class ConflictError(ApiError):
    status_code = 409
    code = ErrorCode.CONFLICT


class BadRequestError(ApiError):
    status_code = 400
    code = ErrorCode.BAD_REQUEST


class AuthRequiredError(ApiError):
    status_code = 401
    code = ErrorCode.AUTH_REQUIRED

    def __init__(self, message: str = "Authentication required", details: Optional[Any] = None):
        super().__init__(message, details)


class ForbiddenError(ApiError):
    status_code = 403
    code = ErrorCode.FORBIDDEN

    def __init__(self, message: str = "Insufficient permissions", details: Optional[Any] = None):
        super().__init__(message, details)


class ValidationError(ApiError):
    status_code = 422
    code = ErrorCode.VALIDATION_ERROR


class InternalError(ApiError):
    status_code = 500
    code = ErrorCode.INTERNAL_ERROR
