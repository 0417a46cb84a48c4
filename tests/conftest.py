# =============================================================================
# ORDER BACK OFFICE - TEST CONFIGURATION
# =============================================================================
# Общие фикстуры: временная SQLite вместо PostgreSQL, httpx-клиент
# к приложению FastAPI, базовые данные (клиенты, сотрудники, товары) и JWT.
# =============================================================================

import os
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Dict

# Окружение тестов задаётся ДО импорта приложения
os.environ["SENTRY_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["TIMEZONE"] = "Asia/Tashkent"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backoffice.core.config import DATABASE_SCHEMA
from backoffice.core.security import create_access_token, hash_password
from backoffice.database.connection import get_db_session, init_models
from backoffice.database.models import Customer, Employee, Order, OrderDetail, Product
from backoffice.main import app


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
async def engine(tmp_path):
    """SQLite во временном файле; схема убирается из имён таблиц."""
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}",
        execution_options={"schema_translate_map": {DATABASE_SCHEMA: None}},
    )
    await init_models(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


# =============================================================================
# CLIENT FIXTURES
# =============================================================================

@pytest.fixture
async def client(session_factory):
    """httpx-клиент к приложению, get_db_session подменён на тестовую БД."""

    async def _override_session():
        async with session_factory() as s:
            try:
                yield s
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def _bearer(employee) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(employee)}"}


@pytest.fixture
def auth_headers(seed) -> Dict[str, str]:
    """Токен сотрудника clerk (роль employee)."""
    return _bearer(seed.clerk)


@pytest.fixture
def admin_headers(seed) -> Dict[str, str]:
    return _bearer(seed.boss)


@pytest.fixture
def outsider_headers(seed) -> Dict[str, str]:
    """Пользователь с токеном, но с ролью без доступа к заказам."""
    return _bearer(seed.visitor)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
async def seed(session):
    """Клиенты, сотрудники и товары."""
    ann = Customer(name="Ann Smith")
    joanna = Customer(name="JOANNA Lee")
    bob = Customer(name="Bob Brown")
    clerk = Employee(name="Clara Clerk", login="clerk", password=hash_password("clerk-pass"), role="employee", status="active")
    boss = Employee(name="Boris Boss", login="boss", role="admin", status="active")
    visitor = Employee(name="Victor Visitor", login="visitor", role="customer", status="active")
    retired = Employee(name="Rita Retired", login="retired", password=hash_password("retired-pass"), role="employee", status="blocked")
    p1 = Product(name="Green tea 100g", sell_price=Decimal("12.50"))
    p2 = Product(name="Sugar 1kg", sell_price=Decimal("3.00"))
    session.add_all([ann, joanna, bob, clerk, boss, visitor, retired, p1, p2])
    await session.commit()
    return SimpleNamespace(
        ann=ann, joanna=joanna, bob=bob,
        clerk=clerk, boss=boss, visitor=visitor, retired=retired,
        p1=p1, p2=p2,
    )


@pytest.fixture
def make_order(session):
    """Создаёт заказ напрямую в БД (дата в UTC)."""

    async def _make(customer, employee, order_date: datetime, status="Pending", products=()):
        order = Order(
            customer_id=customer.id,
            employee_id=employee.id,
            order_date=order_date.astimezone(timezone.utc),
            status=status,
            total=Decimal("0"),
        )
        for product in products:
            order.order_details.append(
                OrderDetail(product_id=product.id, quantity=1, sell_price=product.sell_price)
            )
        session.add(order)
        await session.commit()
        return order

    return _make
