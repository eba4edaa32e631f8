# backend/artsign/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API:
- Sesión de base de datos por petición
- Servicios de negocio construidos al arrancar (app.state.services)
- Usuario autenticado a partir del token Bearer
- Comprobaciones de rol y de propiedad
"""

import logging
from typing import AsyncGenerator, Callable, Literal, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.config import settings
from artsign.core.enums import UserRole, UserStatus
from artsign.core.exceptions import AuthRequiredError, ForbiddenError
from artsign.core.security import verify_access_token
from artsign.crud import user_crud
from artsign.db.database import AsyncSessionLocal
from artsign.db.models.user_model import User
from artsign.schemas.common_schema import PaginationParams
from artsign.services.container import ServiceContainer
from artsign.services.customer_service import CustomerService
from artsign.services.category_service import CategoryService
from artsign.services.invoice_service import InvoiceService
from artsign.services.order_service import OrderService
from artsign.services.product_service import ProductService
from artsign.services.quotation_service import QuotationService

logger = logging.getLogger(__name__)

# Sin auto_error para responder con el formato de error propio
bearer_scheme = HTTPBearer(auto_error=False)

MANAGER_ROLES = (UserRole.MANAGER.value, UserRole.SUPER_ADMIN.value)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session


def get_settings():
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return settings


# ========================================
# SERVICIOS
# ========================================

def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_customer_service(services: ServiceContainer = Depends(get_services)) -> CustomerService:
    return services.customers


def get_category_service(services: ServiceContainer = Depends(get_services)) -> CategoryService:
    return services.categories


def get_product_service(services: ServiceContainer = Depends(get_services)) -> ProductService:
    return services.products


def get_order_service(services: ServiceContainer = Depends(get_services)) -> OrderService:
    return services.orders


def get_quotation_service(services: ServiceContainer = Depends(get_services)) -> QuotationService:
    return services.quotations


def get_invoice_service(services: ServiceContainer = Depends(get_services)) -> InvoiceService:
    return services.invoices


# ========================================
# AUTENTICACIÓN Y ROLES
# ========================================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Valida el token Bearer y devuelve el usuario, que debe estar activo.
    """
    if credentials is None or not credentials.credentials:
        raise AuthRequiredError()

    user_id = verify_access_token(credentials.credentials)
    if user_id is None:
        raise AuthRequiredError("Invalid or expired token")

    user = await user_crud.get_user(db, user_id)
    if user is None:
        raise AuthRequiredError("Invalid or expired token")
    if user.status != UserStatus.ACTIVE.value:
        logger.warning(f"🔒 Acceso denegado a usuario {user.id} con estado {user.status}")
        raise ForbiddenError("User account is not active")
    return user


def require_roles(*roles: UserRole) -> Callable:
    """
    Factoría de dependencias que exige uno de los roles indicados.

    Uso:
        @router.get("/", dependencies=[Depends(require_roles(UserRole.MANAGER))])
    """
    allowed = {UserRole(role).value for role in roles}

    async def role_dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError()
        return current_user

    return role_dependency


# Atajos de uso habitual en los endpoints
require_manager = require_roles(UserRole.MANAGER, UserRole.SUPER_ADMIN)
require_super_admin = require_roles(UserRole.SUPER_ADMIN)


def is_manager(user: User) -> bool:
    return user.role in MANAGER_ROLES


def ensure_self_or_manager(user: User, owner_id: str) -> None:
    """El recurso debe pertenecer al usuario, salvo para gestores y administradores."""
    if user.id != owner_id and not is_manager(user):
        raise ForbiddenError("You can only access your own resources")


# ========================================
# PAGINACIÓN
# ========================================

def get_pagination(
    page: int = Query(1, ge=1, description="Página (empieza en 1)"),
    limit: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE, description="Registros por página"),
    sort_by: str = Query("created_at", description="Columna de ordenación"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
