# backend/artsign/api/v1/api_router.py
"""
Este archivo contiene el router principal para la API versión 1.

Se encarga de registrar y configurar todos los routers de la versión 1 de la API.
"""

from fastapi import APIRouter

# Importación de routers especializados por dominio de negocio
from artsign.api.v1.endpoints import (
    categories,
    customers,
    invoices,
    orders,
    products,
    quotations,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL V1
# ========================================

api_router_v1 = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# Catálogo
api_router_v1.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router_v1.include_router(products.router, prefix="/products", tags=["Products"])

# Clientes
api_router_v1.include_router(customers.router, prefix="/customers", tags=["Customers"])

# Ventas: pedidos, cotizaciones y facturas
api_router_v1.include_router(orders.router, prefix="/orders", tags=["Orders"])
api_router_v1.include_router(quotations.router, prefix="/quotations", tags=["Quotations"])
api_router_v1.include_router(invoices.router, prefix="/invoices", tags=["Invoices"])
