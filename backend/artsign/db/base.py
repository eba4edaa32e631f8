# backend/artsign/db/base.py
"""
Importa todos los modelos para que queden registrados en Base.metadata
(create_all, migraciones y resolución de relaciones por nombre).
"""

from artsign.db.database import Base  # noqa: F401
from artsign.db.models.user_model import User  # noqa: F401
from artsign.db.models.customer_model import Customer  # noqa: F401
from artsign.db.models.category_model import Category  # noqa: F401
from artsign.db.models.product_model import Product  # noqa: F401
from artsign.db.models.order_model import Order, OrderItem  # noqa: F401
from artsign.db.models.quotation_model import Quotation, QuotationItem  # noqa: F401
from artsign.db.models.invoice_model import Invoice  # noqa: F401
from artsign.db.models.audit_model import AuditLog  # noqa: F401
