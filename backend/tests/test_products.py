import re

import pytest

from artsign.core.enums import StockOperation, StockStatus
from artsign.core.exceptions import BadRequestError, ConflictError, NotFoundError
from artsign.schemas.category_schema import CategoryCreate
from artsign.schemas.product_schema import ProductCreate, ProductFilter, ProductUpdate

from conftest import stock_of


@pytest.mark.parametrize("quantity,should_fail", [(4, False), (5, False), (6, True), (50, True)])
async def test_subtract_fails_only_when_exceeding_stock(db, services, seed, quantity, should_fail):
    if should_fail:
        with pytest.raises(BadRequestError, match="Insufficient stock for product Vinyl Banner"):
            await services.products.update_product_stock(db, seed.banner_id, quantity, "subtract")
        assert await stock_of(db, seed.banner_id) == 5
    else:
        product = await services.products.update_product_stock(db, seed.banner_id, quantity, "subtract")
        assert product.current_stock == 5 - quantity


async def test_add_and_set_stock(db, services, seed):
    product = await services.products.update_product_stock(db, seed.banner_id, 7, StockOperation.ADD)
    assert product.current_stock == 12
    assert product.stock_status == StockStatus.IN_STOCK

    product = await services.products.update_product_stock(db, seed.banner_id, 0, StockOperation.SET)
    assert product.current_stock == 0
    assert product.stock_status == StockStatus.OUT_OF_STOCK


async def test_stock_update_requires_tracking(db, services, seed):
    with pytest.raises(BadRequestError, match="not enabled"):
        await services.products.update_product_stock(db, seed.cards_id, 1, "add")


async def test_stock_update_missing_product(db, services, seed):
    with pytest.raises(NotFoundError):
        await services.products.update_product_stock(db, "missing", 1, "add")


async def test_create_product_generates_sku(db, services, seed):
    product = await services.products.create_product(
        db,
        ProductCreate(
            name="Window Decal",
            category_id=seed.category_id,
            price=12.5,
            features=["UV resistant"],
            specifications={"material": "vinyl"},
        ),
        user_id=seed.manager_id,
    )

    assert re.fullmatch(r"PRD-\d{13}", product.sku)
    assert product.category_name == "Banners"
    assert product.low_stock_threshold == 10
    assert product.features == ["UV resistant"]
    assert product.specifications == {"material": "vinyl"}


async def test_create_product_accepts_json_strings(db, services, seed):
    product = await services.products.create_product(
        db,
        ProductCreate(
            sku="POS-001",
            name="Poster",
            category_id=seed.category_id,
            price=3,
            color_options='["red", "blue"]',
        ),
    )

    assert product.color_options == ["red", "blue"]


async def test_create_product_validations(db, services, seed):
    with pytest.raises(NotFoundError, match="Category"):
        await services.products.create_product(db, ProductCreate(name="X", category_id="none", price=1))

    with pytest.raises(ConflictError):
        await services.products.create_product(
            db, ProductCreate(sku="BAN-001", name="Dup", category_id=seed.category_id, price=1)
        )


async def test_update_product_checks_category(db, services, seed):
    with pytest.raises(NotFoundError):
        await services.products.update_product(db, seed.cards_id, ProductUpdate(category_id="none"))

    product = await services.products.update_product(db, seed.cards_id, ProductUpdate(price=6.25, featured=False))
    assert float(product.price) == 6.25
    assert product.featured is False


async def test_filters_search_and_featured(db, services, seed, pagination):
    products, total = await services.products.get_products(db, pagination, ProductFilter(in_stock=True))
    assert total == 2

    products, total = await services.products.get_products(db, pagination, ProductFilter(max_price=7))
    assert [p.id for p in products] == [seed.cards_id]

    products, total = await services.products.search_products(db, "vinyl", pagination)
    assert [p.id for p in products] == [seed.banner_id]

    featured = await services.products.get_featured_products(db)
    assert [p.id for p in featured] == [seed.cards_id]

    with pytest.raises(BadRequestError):
        await services.products.search_products(db, "  ", pagination)


async def test_low_stock_report(db, services, seed):
    low = await services.products.check_low_stock(db)

    assert [p.id for p in low] == [seed.banner_id]
    assert low[0].stock_status == StockStatus.LOW_STOCK


async def test_products_by_category_and_duplicate_category(db, services, seed, pagination):
    products, total = await services.products.get_products_by_category(db, seed.category_id, pagination)
    assert total == 2

    with pytest.raises(NotFoundError):
        await services.products.get_products_by_category(db, "none", pagination)

    with pytest.raises(ConflictError):
        await services.categories.create_category(db, CategoryCreate(name="Banners"))


async def test_adjust_stock_names_product_when_update_finds_too_little(db, services, seed):
    with pytest.raises(BadRequestError, match="Insufficient stock for product Vinyl Banner"):
        await services.products.adjust_stock(db, seed.banner_id, 99, StockOperation.SUBTRACT)
    await db.rollback()

    assert await stock_of(db, seed.banner_id) == 5
