import os

# La configuración se lee al importar artsign: fijar el entorno antes
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("LOG_FILE_PATH", "")

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from jose import jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from artsign.core.config import settings
from artsign.core.enums import UserRole, UserStatus
from artsign.db import base  # noqa: F401
from artsign.db.database import Base
from artsign.db.models.category_model import Category
from artsign.db.models.product_model import Product
from artsign.db.models.user_model import User
from artsign.services.container import build_services


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def services():
    return build_services(settings)


@pytest.fixture
async def seed(session_factory):
    """
    Usuarios de cada rol, una categoría y dos productos:
    - banner: con control de stock (5 unidades)
    - cards: sin control de stock
    Devuelve solo IDs para no depender del estado de las instancias ORM.
    """
    async with session_factory() as session:
        customer = User(email="ana@example.com", first_name="Ana", last_name="Lopez", role=UserRole.USER.value)
        other = User(email="luis@example.com", first_name="Luis", last_name="Mora", role=UserRole.USER.value)
        manager = User(email="marta@example.com", first_name="Marta", last_name="Gil", role=UserRole.MANAGER.value)
        admin = User(email="root@example.com", first_name="Root", last_name="Admin", role=UserRole.SUPER_ADMIN.value)
        inactive = User(
            email="old@example.com",
            first_name="Old",
            last_name="User",
            role=UserRole.USER.value,
            status=UserStatus.SUSPENDED.value,
        )
        category = Category(name="Banners", description="Lonas y banners")
        session.add_all([customer, other, manager, admin, inactive, category])
        await session.flush()

        banner = Product(
            sku="BAN-001",
            name="Vinyl Banner",
            category_id=category.id,
            price=10,
            track_stock=True,
            current_stock=5,
            low_stock_threshold=10,
        )
        cards = Product(
            sku="CRD-001",
            name="Business Cards",
            category_id=category.id,
            price=5,
            track_stock=False,
            featured=True,
        )
        session.add_all([banner, cards])
        await session.commit()

        return SimpleNamespace(
            customer_id=customer.id,
            other_id=other.id,
            manager_id=manager.id,
            admin_id=admin.id,
            inactive_id=inactive.id,
            category_id=category.id,
            banner_id=banner.id,
            cards_id=cards.id,
        )


async def stock_of(db, product_id: str) -> int:
    return await db.scalar(select(Product.current_stock).where(Product.id == product_id))


async def count_rows(db, model) -> int:
    return await db.scalar(select(func.count()).select_from(model))


def make_token(user_id: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    payload = {"sub": user_id, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def pagination():
    from artsign.schemas.common_schema import PaginationParams

    return PaginationParams(page=1, limit=10)
