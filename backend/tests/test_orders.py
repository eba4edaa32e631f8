import re
from decimal import Decimal

import pytest

from artsign.core.enums import OrderStatus
from artsign.core.exceptions import BadRequestError, NotFoundError, UserNotFoundError
from artsign.crud import order_crud
from artsign.db.models.audit_model import AuditLog
from artsign.db.models.order_model import Order
from artsign.schemas.order_schema import OrderCreate, OrderItemCreate

from conftest import count_rows, stock_of


def order_payload(*lines, **extra) -> OrderCreate:
    return OrderCreate(
        items=[OrderItemCreate(product_id=pid, quantity=qty, unit_price=price) for pid, qty, price in lines],
        **extra,
    )


async def test_create_order_computes_totals_and_number(db, services, seed):
    order = await services.orders.create_order(
        db, seed.customer_id, order_payload((seed.banner_id, 2, 10.0), (seed.cards_id, 1, 5.0))
    )

    assert order.subtotal == Decimal("25.00")
    assert order.tax_amount == Decimal("1.75")
    assert order.shipping_cost == Decimal("0")
    assert order.total_amount == order.subtotal + order.tax_amount + order.shipping_cost
    assert order.total_amount == Decimal("26.75")
    assert re.fullmatch(r"ORD-\d{13}-\d{3}", order.order_number)
    assert order.status == OrderStatus.PENDING_PAYMENT.value
    assert order.payment_status == "PENDING"
    assert order.shipping_method == "STANDARD"
    assert {item.product_name for item in order.items} == {"Vinyl Banner", "Business Cards"}


async def test_create_order_uses_caller_prices(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 3, 1.99)))

    assert order.items[0].unit_price == Decimal("1.99")
    assert order.items[0].total_price == Decimal("5.97")
    assert order.tax_amount == Decimal("0.42")


async def test_create_order_decrements_only_tracked_stock(db, services, seed):
    await services.orders.create_order(
        db, seed.customer_id, order_payload((seed.banner_id, 3, 10.0), (seed.cards_id, 50, 5.0))
    )

    assert await stock_of(db, seed.banner_id) == 2
    assert await stock_of(db, seed.cards_id) == 0


async def test_create_order_rejects_insufficient_stock(db, services, seed):
    with pytest.raises(BadRequestError, match="Vinyl Banner"):
        await services.orders.create_order(db, seed.customer_id, order_payload((seed.banner_id, 6, 10.0)))

    assert await stock_of(db, seed.banner_id) == 5
    assert await count_rows(db, Order) == 0


async def test_create_order_unknown_user(db, services, seed):
    with pytest.raises(UserNotFoundError):
        await services.orders.create_order(db, "missing-user", order_payload((seed.cards_id, 1, 5.0)))


async def test_create_order_unknown_product(db, services, seed):
    with pytest.raises(NotFoundError, match="missing-product"):
        await services.orders.create_order(db, seed.customer_id, order_payload(("missing-product", 1, 5.0)))


async def test_failed_stock_decrement_leaves_no_order_and_no_stock_change(db, services, seed):
    # Cada línea pasa la comprobación previa, pero juntas superan el stock
    payload = order_payload((seed.banner_id, 3, 10.0), (seed.banner_id, 3, 10.0))

    with pytest.raises(BadRequestError, match="Insufficient stock for product Vinyl Banner"):
        await services.orders.create_order(db, seed.customer_id, payload)

    assert await stock_of(db, seed.banner_id) == 5
    assert await count_rows(db, Order) == 0
    assert await count_rows(db, AuditLog) == 0


async def test_create_order_writes_audit_record(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 1, 5.0)))

    assert await count_rows(db, AuditLog) == 1
    log = (await db.execute(AuditLog.__table__.select())).one()
    assert log.action == "CREATE"
    assert log.entity == "Order"
    assert log.entity_id == order.id
    assert log.user_id == seed.customer_id


async def test_cancel_order_restores_stock(db, services, seed):
    assert await stock_of(db, seed.banner_id) == 5

    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.banner_id, 3, 10.0)))
    assert await stock_of(db, seed.banner_id) == 2

    cancelled = await services.orders.cancel_order(db, order.id, user_id=seed.manager_id)
    assert cancelled.status == OrderStatus.CANCELLED.value
    assert await stock_of(db, seed.banner_id) == 5


async def test_cancel_order_allowed_from_processing(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.banner_id, 1, 10.0)))
    await services.orders.update_order_status(db, order.id, OrderStatus.PROCESSING)

    cancelled = await services.orders.cancel_order(db, order.id)

    assert cancelled.status == OrderStatus.CANCELLED.value
    assert await stock_of(db, seed.banner_id) == 5


@pytest.mark.parametrize(
    "status",
    [OrderStatus.IN_PROGRESS, OrderStatus.ASSIGNED, OrderStatus.COMPLETED, OrderStatus.CANCELLED],
)
async def test_cancel_order_rejected_outside_cancellable_states(db, services, seed, status):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.banner_id, 2, 10.0)))
    await services.orders.update_order_status(db, order.id, status)

    with pytest.raises(BadRequestError):
        await services.orders.cancel_order(db, order.id)

    assert await stock_of(db, seed.banner_id) == 3


async def test_cancel_missing_order(db, services, seed):
    with pytest.raises(NotFoundError):
        await services.orders.cancel_order(db, "missing-order")


async def test_tracking_number_advances_processing_order(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 1, 5.0)))
    await services.orders.update_order_status(db, order.id, OrderStatus.PROCESSING)

    updated = await services.orders.add_tracking_number(db, order.id, "TRK-123")

    assert updated.tracking_number == "TRK-123"
    assert updated.status == OrderStatus.IN_PROGRESS.value


async def test_tracking_number_keeps_other_statuses(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 1, 5.0)))

    updated = await services.orders.add_tracking_number(db, order.id, "TRK-999")

    assert updated.tracking_number == "TRK-999"
    assert updated.status == OrderStatus.PENDING_PAYMENT.value


async def test_status_updates_are_unconditional(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 1, 5.0)))

    await services.orders.update_order_status(db, order.id, OrderStatus.COMPLETED)
    reopened = await services.orders.update_order_status(db, order.id, OrderStatus.PENDING_PAYMENT)
    paid = await services.orders.update_payment_status(db, order.id, "PAID")

    assert reopened.status == OrderStatus.PENDING_PAYMENT.value
    assert paid.payment_status == "PAID"


async def test_user_orders_are_filtered_by_owner(db, services, seed, pagination):
    await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 1, 5.0)))
    await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 2, 5.0)))
    await services.orders.create_order(db, seed.other_id, order_payload((seed.cards_id, 1, 5.0)))

    orders, total = await services.orders.get_user_orders(db, seed.customer_id, pagination)

    assert total == 2
    assert all(order.user_id == seed.customer_id for order in orders)


async def test_delete_order_removes_items(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.cards_id, 1, 5.0)))

    await services.orders.delete_order(db, order.id, user_id=seed.admin_id)

    assert await order_crud.get_order(db, order.id) is None
    assert await count_rows(db, Order) == 0


async def test_created_order_records_stock_deduction(db, services, seed):
    order = await services.orders.create_order(db, seed.customer_id, order_payload((seed.banner_id, 2, 10.0)))
    assert order.stock_deducted is True

    cancelled = await services.orders.cancel_order(db, order.id)
    assert cancelled.stock_deducted is False
    assert await stock_of(db, seed.banner_id) == 5
