"""
Подключение к PostgreSQL (async). Конфигурация из backoffice.core.config.
"""
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.pool import NullPool
from sqlalchemy import text

from backoffice.core.config import DATABASE_URL as _RAW_URL, DATABASE_SCHEMA, API_DEBUG
from backoffice.database.models import Base

logger = logging.getLogger(__name__)


def normalize_database_url(raw_url: str) -> str:
    """Приводит postgresql:// и postgresql+psycopg:// к async-драйверу asyncpg."""
    if "+psycopg" in raw_url:
        raw_url = raw_url.replace("postgresql+psycopg://", "postgresql://", 1)
    if raw_url.startswith("postgresql://"):
        raw_url = raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return raw_url


DATABASE_URL = normalize_database_url(_RAW_URL)

# NullPool не поддерживает pool_size/max_overflow
engine = create_async_engine(
    DATABASE_URL,
    echo=API_DEBUG,
    future=True,
    pool_pre_ping=True,
    poolclass=NullPool,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db_session():
    """Генератор сессии для эндпоинтов."""
    async with async_session() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error("Database session error: %s", e)
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_db():
    """Контекст-менеджер для операций с БД вне эндпоинтов."""
    async with async_session() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error("Database error: %s", e)
            raise
        finally:
            await session.close()


async def init_models(target: AsyncEngine | None = None):
    """Создать схему (только PostgreSQL) и все таблицы, если их нет."""
    target = target or engine
    async with target.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{DATABASE_SCHEMA}"'))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables ready: %s", sorted(Base.metadata.tables))


async def test_connection():
    """Проверка подключения к БД."""
    try:
        async with engine.begin() as conn:
            result = await conn.execute(text("SELECT version();"))
            version = result.scalar()
            logger.info("Database connected. PostgreSQL: %s", version)
            return True
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False


async def get_schema_info():
    """Список таблиц в схеме заказов."""
    async with engine.begin() as conn:
        result = await conn.execute(
            text(
                """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = :schema
            ORDER BY table_name;
            """
            ),
            {"schema": DATABASE_SCHEMA},
        )
        tables = result.fetchall()
        logger.info("Tables in %s schema: %s", DATABASE_SCHEMA, [t[0] for t in tables])
        return tables


async def check_data_integrity():
    """Проверка целостности данных."""
    schema = DATABASE_SCHEMA
    checks = [
        (
            "Orders without customer",
            f'SELECT COUNT(*) FROM "{schema}".orders WHERE customer_id IS NOT NULL '
            f'AND customer_id NOT IN (SELECT id FROM "{schema}".customers)',
        ),
        (
            "Order details without order",
            f'SELECT COUNT(*) FROM "{schema}".order_details WHERE order_id NOT IN (SELECT id FROM "{schema}".orders)',
        ),
        (
            "Order details without product",
            f'SELECT COUNT(*) FROM "{schema}".order_details WHERE product_id NOT IN (SELECT id FROM "{schema}".products)',
        ),
    ]
    for name, query in checks:
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(query))
                count = result.scalar()
                logger.info("%s %s: %s", "WARN" if count and count > 0 else "OK", name, count)
        except Exception as e:
            logger.warning("Check %s failed: %s", name, e)


async def cleanup():
    """Закрытие пула при завершении."""
    await engine.dispose()
