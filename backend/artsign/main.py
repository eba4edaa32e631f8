# backend/artsign/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación FastAPI completa:
- Logging centralizado
- Contenedor de servicios en app.state.services
- Registro de routers de la API con prefijos
- Manejadores de errores con la respuesta estándar {success, message, code}
- Eventos del ciclo de vida (creación de tablas y planificador de tareas)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from artsign.api.v1.api_router import api_router_v1  # Router principal de la API v1
from artsign.core.config import settings  # Configuración centralizada de la aplicación
from artsign.core.exceptions import ApiError, ErrorCode
from artsign.core.logging_config import setup_logging
from artsign.db.database import AsyncSessionLocal, create_all_tables
from artsign.jobs.scheduler import create_scheduler, start_scheduler, stop_scheduler
from artsign.services.container import build_services

setup_logging(settings)
logger = logging.getLogger(__name__)

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API de gestión comercial de ArtSign: clientes, catálogo, pedidos, cotizaciones y facturas",
)

# Servicios de negocio, construidos una sola vez por proceso
app.state.services = build_services(settings)
app.state.scheduler = None

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

app.include_router(api_router_v1, prefix=settings.API_V1_STR)

# ========================================
# MANEJO DE ERRORES
# ========================================

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"❌ ERROR {exc.code.value}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Validation failed",
            "code": ErrorCode.VALIDATION_ERROR.value,
            "details": errors,
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "code": ErrorCode.INTERNAL_ERROR.value},
    )


# ========================================
# ENDPOINTS RAÍZ Y VERIFICACIÓN DE ESTADO
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """
    Endpoint raíz para verificación básica del estado de la API.

    Returns:
        dict: Mensaje de bienvenida con nombre y versión del proyecto
    """
    return {"message": f"Bienvenido a {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}

# ========================================
# EVENTOS DEL CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@app.on_event("startup")
async def startup_event():
    """
    Evento ejecutado al iniciar la aplicación.

    Tareas de inicialización:
    - Creación de tablas si DB_CREATE_TABLES está activo (desarrollo)
    - Arranque del planificador de tareas (facturas vencidas)
    """
    if settings.DB_CREATE_TABLES:
        await create_all_tables()
        logger.info("✅ Tablas de base de datos verificadas")

    if settings.SCHEDULER_ENABLED:
        app.state.scheduler = create_scheduler(settings, app.state.services.invoices, AsyncSessionLocal)
        start_scheduler(app.state.scheduler)
    else:
        logger.info("ℹ️  Scheduler deshabilitado (SCHEDULER_ENABLED=false)")


@app.on_event("shutdown")
async def shutdown_event():
    if app.state.scheduler is not None:
        stop_scheduler(app.state.scheduler)
