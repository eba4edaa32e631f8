# backend/artsign/services/container.py
"""
Contenedor de servicios.

Los servicios se construyen una sola vez al arrancar la aplicación y se
guardan en `app.state.services`; los endpoints los reciben mediante las
dependencias de artsign/api/deps.py.
"""

from dataclasses import dataclass

from artsign.core.config import Settings
from artsign.services.audit_service import AuditService
from artsign.services.category_service import CategoryService
from artsign.services.customer_service import CustomerService
from artsign.services.invoice_service import InvoiceService
from artsign.services.order_service import OrderService
from artsign.services.product_service import ProductService
from artsign.services.quotation_service import QuotationService


@dataclass(frozen=True)
class ServiceContainer:
    audit: AuditService
    categories: CategoryService
    products: ProductService
    customers: CustomerService
    orders: OrderService
    quotations: QuotationService
    invoices: InvoiceService


def build_services(settings: Settings) -> ServiceContainer:
    audit = AuditService()
    products = ProductService(settings, audit)

    return ServiceContainer(
        audit=audit,
        categories=CategoryService(audit),
        products=products,
        customers=CustomerService(audit),
        orders=OrderService(settings, products, audit),
        quotations=QuotationService(settings, audit),
        invoices=InvoiceService(settings, audit),
    )
