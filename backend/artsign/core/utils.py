# backend/artsign/core/utils.py
"""
Utilidades compartidas: fechas en UTC, redondeo monetario y numeración
de documentos (pedidos, cotizaciones, facturas).
"""

import random
import time
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple, Union

CENT = Decimal("0.01")

Number = Union[Decimal, float, int, str]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normaliza una fecha a UTC con zona horaria.
    Las fechas sin zona (p.ej. leídas de SQLite) se asumen ya en UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_money(value: Number) -> Decimal:
    """Convierte a Decimal redondeado a céntimos (half-up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(
    line_totals: Iterable[Decimal],
    tax_rate: Number,
    shipping_cost: Number = 0,
) -> Tuple[Decimal, Decimal, Decimal]:
    """
    Calcula (subtotal, impuesto, total) a partir de los totales de línea.

    total = subtotal + impuesto + envío
    """
    subtotal = to_money(sum(line_totals, Decimal("0")))
    tax_amount = to_money(subtotal * Decimal(str(tax_rate)))
    total_amount = subtotal + tax_amount + to_money(shipping_cost)
    return subtotal, tax_amount, total_amount


def generate_document_number(prefix: str) -> str:
    """
    Genera un número legible con el formato PREFIJO-<unixMillis>-<3 dígitos>.
    La unicidad la garantiza la restricción UNIQUE de la columna.
    """
    timestamp = int(time.time() * 1000)
    suffix = random.randint(0, 999)
    return f"{prefix}-{timestamp}-{suffix:03d}"
