import json
import re
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from artsign.core.enums import OrderStatus, QuotationStatus
from artsign.core.exceptions import BadRequestError, NotFoundError, UserNotFoundError
from artsign.core.utils import utcnow
from artsign.crud import order_crud
from artsign.db.models.audit_model import AuditLog
from artsign.schemas.quotation_schema import QuotationCreate, QuotationItemCreate, QuotationUpdate

from conftest import stock_of


def quotation_payload(user_id, *lines, valid_for=timedelta(days=15), **extra) -> QuotationCreate:
    return QuotationCreate(
        user_id=user_id,
        title=extra.pop("title", "Signage for new store"),
        valid_until=utcnow() + valid_for,
        items=[QuotationItemCreate(product_id=pid, quantity=qty, unit_price=price) for pid, qty, price in lines],
        **extra,
    )


async def create_standard_quotation(db, services, seed, **kwargs):
    payload = quotation_payload(seed.customer_id, (seed.banner_id, 2, 10.0), (seed.cards_id, 1, 5.0), **kwargs)
    return await services.quotations.create_quotation(db, payload, created_by=seed.manager_id)


async def test_create_quotation_computes_totals(db, services, seed):
    quotation = await create_standard_quotation(db, services, seed)

    assert quotation.subtotal == Decimal("25.00")
    assert quotation.tax_amount == Decimal("1.75")
    assert quotation.total_amount == Decimal("26.75")
    assert quotation.status == QuotationStatus.PENDING.value
    assert re.fullmatch(r"QUO-\d{13}-\d{3}", quotation.quotation_number)
    assert len(quotation.items) == 2


async def test_create_quotation_does_not_check_or_touch_stock(db, services, seed):
    payload = quotation_payload(seed.customer_id, (seed.banner_id, 100, 10.0))

    quotation = await services.quotations.create_quotation(db, payload)

    assert quotation.total_amount == Decimal("1070.00")
    assert await stock_of(db, seed.banner_id) == 5


async def test_create_quotation_requires_existing_user_and_products(db, services, seed):
    with pytest.raises(UserNotFoundError):
        await services.quotations.create_quotation(db, quotation_payload("nobody", (seed.cards_id, 1, 5.0)))

    with pytest.raises(NotFoundError):
        await services.quotations.create_quotation(db, quotation_payload(seed.customer_id, ("nothing", 1, 5.0)))


async def test_accept_and_convert_scenario(db, services, seed):
    quotation = await create_standard_quotation(db, services, seed)

    accepted = await services.quotations.accept_quotation(db, quotation.id, user_id=seed.customer_id)
    assert accepted.status == QuotationStatus.ACCEPTED.value

    converted, order_id = await services.quotations.convert_to_order(db, quotation.id, user_id=seed.manager_id)
    order = await order_crud.get_order(db, order_id)

    assert converted.status == QuotationStatus.ACCEPTED.value
    assert order.total_amount == quotation.total_amount == Decimal("26.75")
    assert order.subtotal == quotation.subtotal
    assert order.tax_amount == quotation.tax_amount
    assert order.user_id == seed.customer_id
    assert order.notes == f"Created from quotation {quotation.quotation_number}"
    assert re.fullmatch(r"ORD-\d{13}-\d{3}", order.order_number)
    assert sorted((i.product_id, i.quantity) for i in order.items) == sorted(
        [(seed.banner_id, 2), (seed.cards_id, 1)]
    )
    assert await stock_of(db, seed.banner_id) == 5


async def test_convert_records_source_quotation_in_audit(db, services, seed):
    quotation = await create_standard_quotation(db, services, seed)
    await services.quotations.accept_quotation(db, quotation.id)

    _, order_id = await services.quotations.convert_to_order(db, quotation.id, user_id=seed.manager_id)

    log = (await db.execute(select(AuditLog).where(AuditLog.entity_id == order_id))).scalar_one()
    assert log.action == "CREATE"
    assert json.loads(log.changes) == {"converted_from_quotation": quotation.id}


async def test_accept_from_sent(db, services, seed):
    quotation = await create_standard_quotation(db, services, seed)
    await services.quotations.send_quotation(db, quotation.id)

    accepted = await services.quotations.accept_quotation(db, quotation.id)

    assert accepted.status == QuotationStatus.ACCEPTED.value


@pytest.mark.parametrize("status", [QuotationStatus.SENT, QuotationStatus.PENDING, QuotationStatus.DRAFT])
async def test_accept_expired_fails_regardless_of_status(db, services, seed, status):
    quotation = await create_standard_quotation(db, services, seed, valid_for=timedelta(days=-1))
    await services.quotations.update_quotation_status(db, quotation.id, status)

    with pytest.raises(BadRequestError, match="expired"):
        await services.quotations.accept_quotation(db, quotation.id)


@pytest.mark.parametrize(
    "status",
    [QuotationStatus.DRAFT, QuotationStatus.REJECTED, QuotationStatus.ACCEPTED, QuotationStatus.EXPIRED],
)
async def test_accept_requires_sent_or_pending(db, services, seed, status):
    quotation = await create_standard_quotation(db, services, seed)
    await services.quotations.update_quotation_status(db, quotation.id, status)

    with pytest.raises(BadRequestError):
        await services.quotations.accept_quotation(db, quotation.id)


async def test_convert_requires_accepted(db, services, seed):
    quotation = await create_standard_quotation(db, services, seed)

    with pytest.raises(BadRequestError, match="accepted"):
        await services.quotations.convert_to_order(db, quotation.id)


async def test_convert_rejects_expired_quotation(db, services, seed):
    quotation = await create_standard_quotation(db, services, seed)
    await services.quotations.accept_quotation(db, quotation.id)
    await services.quotations.update_quotation(
        db, quotation.id, QuotationUpdate(valid_until=utcnow() - timedelta(hours=1))
    )

    with pytest.raises(BadRequestError, match="expired"):
        await services.quotations.convert_to_order(db, quotation.id)


async def test_convert_missing_quotation(db, services, seed):
    with pytest.raises(NotFoundError):
        await services.quotations.convert_to_order(db, "missing")


async def test_reject_is_unconditional(db, services, seed):
    accepted = await create_standard_quotation(db, services, seed)
    await services.quotations.accept_quotation(db, accepted.id)
    expired = await create_standard_quotation(db, services, seed, valid_for=timedelta(days=-3))

    assert (await services.quotations.reject_quotation(db, accepted.id)).status == QuotationStatus.REJECTED.value
    assert (await services.quotations.reject_quotation(db, expired.id)).status == QuotationStatus.REJECTED.value


async def test_delete_quotation(db, services, seed):
    quotation = await create_standard_quotation(db, services, seed)

    await services.quotations.delete_quotation(db, quotation.id, user_id=seed.admin_id)

    with pytest.raises(NotFoundError):
        await services.quotations.get_quotation_by_id(db, quotation.id)


async def test_cancelling_converted_order_leaves_stock_untouched(db, services, seed):
    payload = quotation_payload(seed.customer_id, (seed.banner_id, 3, 10.0))
    quotation = await services.quotations.create_quotation(db, payload, created_by=seed.manager_id)
    await services.quotations.accept_quotation(db, quotation.id)
    _, order_id = await services.quotations.convert_to_order(db, quotation.id)

    order = await order_crud.get_order(db, order_id)
    assert order.stock_deducted is False

    cancelled = await services.orders.cancel_order(db, order_id, user_id=seed.manager_id)

    assert cancelled.status == OrderStatus.CANCELLED.value
    assert await stock_of(db, seed.banner_id) == 5
