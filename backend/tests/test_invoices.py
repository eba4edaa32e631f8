import re
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from artsign.core.enums import InvoiceStatus
from artsign.core.exceptions import BadRequestError, ConflictError, NotFoundError, UserNotFoundError
from artsign.core.utils import ensure_utc, utcnow
from artsign.crud import invoice_crud
from artsign.db.models.audit_model import AuditLog
from artsign.db.models.invoice_model import Invoice
from artsign.jobs.scheduler import run_overdue_invoices_job
from artsign.schemas.invoice_schema import InvoiceCreate
from artsign.schemas.order_schema import OrderCreate, OrderItemCreate

from conftest import count_rows


async def place_order(db, services, user_id, product_id, quantity=2, price=10.0):
    payload = OrderCreate(items=[OrderItemCreate(product_id=product_id, quantity=quantity, unit_price=price)])
    return await services.orders.create_order(db, user_id, payload)


async def test_generate_invoice_from_order(db, services, seed):
    order = await place_order(db, services, seed.customer_id, seed.cards_id)

    invoice = await services.invoices.generate_invoice_from_order(db, order.id, created_by=seed.manager_id)

    assert re.fullmatch(r"INV-\d{13}-\d{3}", invoice.invoice_number)
    assert invoice.amount == order.total_amount == Decimal("21.40")
    assert invoice.user_id == seed.customer_id
    assert invoice.status == InvoiceStatus.UNPAID.value
    assert invoice.paid_date is None
    assert invoice.order_number == order.order_number
    expected_due = utcnow() + timedelta(days=30)
    assert abs(ensure_utc(invoice.due_date) - expected_due) < timedelta(minutes=1)


async def test_generate_invoice_for_missing_order(db, services, seed):
    with pytest.raises(NotFoundError):
        await services.invoices.generate_invoice_from_order(db, "missing-order")


async def test_second_invoice_for_same_order_is_conflict(db, services, seed):
    # El rollback de cada intento fallido expira las instancias de la sesión
    order_id = (await place_order(db, services, seed.customer_id, seed.cards_id)).id
    await services.invoices.generate_invoice_from_order(db, order_id)

    with pytest.raises(ConflictError):
        await services.invoices.generate_invoice_from_order(db, order_id)
    with pytest.raises(ConflictError):
        await services.invoices.create_invoice(
            db,
            InvoiceCreate(order_id=order_id, user_id=seed.customer_id, amount=10, due_date=utcnow()),
        )

    assert await count_rows(db, Invoice) == 1


async def test_create_invoice_validates_order_and_user(db, services, seed):
    order_id = (await place_order(db, services, seed.customer_id, seed.cards_id)).id

    with pytest.raises(NotFoundError):
        await services.invoices.create_invoice(
            db, InvoiceCreate(order_id="nope", user_id=seed.customer_id, amount=10, due_date=utcnow())
        )
    with pytest.raises(UserNotFoundError):
        await services.invoices.create_invoice(
            db, InvoiceCreate(order_id=order_id, user_id="nobody", amount=10, due_date=utcnow())
        )
    assert await count_rows(db, Invoice) == 0


async def test_mark_paid_and_unpaid(db, services, seed):
    order = await place_order(db, services, seed.customer_id, seed.cards_id)
    invoice = await services.invoices.generate_invoice_from_order(db, order.id)

    paid = await services.invoices.mark_as_paid(db, invoice.id)
    assert paid.status == InvoiceStatus.PAID.value
    assert paid.paid_date is not None

    unpaid = await services.invoices.mark_as_unpaid(db, invoice.id)
    assert unpaid.status == InvoiceStatus.UNPAID.value
    assert unpaid.paid_date is None


async def test_paid_invoice_cannot_be_deleted(db, services, seed):
    order = await place_order(db, services, seed.customer_id, seed.cards_id)
    invoice = await services.invoices.generate_invoice_from_order(db, order.id)
    await services.invoices.mark_as_paid(db, invoice.id)

    with pytest.raises(BadRequestError, match="Cannot delete paid invoices"):
        await services.invoices.delete_invoice(db, invoice.id)

    assert await count_rows(db, Invoice) == 1


async def test_unpaid_invoice_can_be_deleted(db, services, seed):
    order = await place_order(db, services, seed.customer_id, seed.cards_id)
    invoice = await services.invoices.generate_invoice_from_order(db, order.id)

    await services.invoices.delete_invoice(db, invoice.id, user_id=seed.admin_id)

    assert await count_rows(db, Invoice) == 0


async def test_update_overdue_status_flips_only_past_due_unpaid(db, services, seed):
    past_due = await services.invoices.generate_invoice_from_order(
        db, (await place_order(db, services, seed.customer_id, seed.cards_id)).id,
        due_date=utcnow() - timedelta(days=1),
    )
    future = await services.invoices.generate_invoice_from_order(
        db, (await place_order(db, services, seed.customer_id, seed.cards_id)).id,
    )
    paid_past_due = await services.invoices.generate_invoice_from_order(
        db, (await place_order(db, services, seed.customer_id, seed.cards_id)).id,
        due_date=utcnow() - timedelta(days=2),
    )
    await services.invoices.mark_as_paid(db, paid_past_due.id)

    count = await services.invoices.update_overdue_status(db)

    assert count == 1
    assert (await invoice_crud.get_invoice(db, past_due.id)).status == InvoiceStatus.OVERDUE.value
    assert (await invoice_crud.get_invoice(db, future.id)).status == InvoiceStatus.UNPAID.value
    assert (await invoice_crud.get_invoice(db, paid_past_due.id)).status == InvoiceStatus.PAID.value

    overdue = await services.invoices.get_overdue_invoices(db)
    assert [invoice.id for invoice in overdue] == [past_due.id]


async def test_overdue_job_uses_its_own_session(db, services, seed, session_factory):
    order = await place_order(db, services, seed.customer_id, seed.cards_id)
    invoice = await services.invoices.generate_invoice_from_order(
        db, order.id, due_date=utcnow() - timedelta(hours=1)
    )

    count = await run_overdue_invoices_job(services.invoices, session_factory)

    assert count == 1
    assert (await invoice_crud.get_invoice(db, invoice.id)).status == InvoiceStatus.OVERDUE.value


async def test_invoices_by_order(db, services, seed):
    order = await place_order(db, services, seed.customer_id, seed.cards_id)
    assert await services.invoices.get_invoices_by_order(db, order.id) == []

    invoice = await services.invoices.generate_invoice_from_order(db, order.id)

    assert [i.id for i in await services.invoices.get_invoices_by_order(db, order.id)] == [invoice.id]
    with pytest.raises(NotFoundError):
        await services.invoices.get_invoices_by_order(db, "missing-order")


async def test_overdue_sweep_is_audited_as_system_change(db, services, seed):
    order_id = (await place_order(db, services, seed.customer_id, seed.cards_id)).id
    invoice = await services.invoices.generate_invoice_from_order(
        db, order_id, due_date=utcnow() - timedelta(days=3)
    )

    await services.invoices.update_overdue_status(db)

    logs = (
        await db.execute(select(AuditLog).where(AuditLog.entity == "Invoice", AuditLog.action == "UPDATE"))
    ).scalars().all()
    assert [(log.entity_id, log.user_id) for log in logs] == [(invoice.id, None)]
