# backend/artsign/core/enums.py
"""
Enumeraciones de dominio compartidas por modelos, esquemas y servicios.

Los valores se guardan como texto en la base de datos (columnas String),
por eso todas heredan de `str`.
"""

import enum


class UserRole(str, enum.Enum):
    USER = "USER"
    MANAGER = "MANAGER"
    SUPER_ADMIN = "SUPER_ADMIN"


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    PENDING_VERIFICATION = "PENDING_VERIFICATION"


class CustomerType(str, enum.Enum):
    INDIVIDUAL = "INDIVIDUAL"
    CORPORATE = "CORPORATE"


class CustomerStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class PaymentTerms(str, enum.Enum):
    IMMEDIATE = "IMMEDIATE"
    NET_30 = "NET_30"
    NET_60 = "NET_60"


class ProductStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISCONTINUED = "DISCONTINUED"


class StockStatus(str, enum.Enum):
    """Nivel de inventario derivado; no se persiste."""
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class PricingModel(str, enum.Enum):
    FIXED = "FIXED"
    MULTI_FACTOR = "MULTI_FACTOR"
    QUANTITY_BASED = "QUANTITY_BASED"
    AREA_BASED = "AREA_BASED"
    CUSTOM = "CUSTOM"


class StockOperation(str, enum.Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    SET = "set"


class OrderStatus(str, enum.Enum):
    """Define los posibles estados de un pedido."""
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PROCESSING = "PROCESSING"
    IN_PROGRESS = "IN_PROGRESS"
    ASSIGNED = "ASSIGNED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    UNPAID = "UNPAID"
    OVERDUE = "OVERDUE"
    PARTIAL = "PARTIAL"


class QuotationStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    APPROVED = "APPROVED"


class InvoiceStatus(str, enum.Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    EXPORT = "EXPORT"


# Estados desde los que se permite cancelar un pedido
CANCELLABLE_ORDER_STATUSES = frozenset({OrderStatus.PENDING_PAYMENT.value, OrderStatus.PROCESSING.value})

# Estados desde los que un cliente puede aceptar una cotización
ACCEPTABLE_QUOTATION_STATUSES = frozenset({QuotationStatus.SENT.value, QuotationStatus.PENDING.value})
