"""
Фильтр списка заказов из query-параметров.

Поддерживаются: customerName, employeeName (подстрока без учёта регистра),
orderDate / orderBeforeDate / orderAfterDate (DD/MM/YYYY) и status (точное совпадение).
Из трёх дат действует только одна, приоритет: orderDate > orderBeforeDate > orderAfterDate.
"""
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.database.models import Customer, Employee, Order
from backoffice.services.dates import format_error, local_midnight, parse_date


@dataclass
class OrderQuery:
    customer_name: str | None = None
    employee_name: str | None = None
    order_date: str | None = None
    order_before_date: str | None = None
    order_after_date: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class In:
    values: tuple


@dataclass(frozen=True)
class Range:
    gte: datetime | None = None
    lt: datetime | None = None


# Предикат: поле Order -> значение (равенство), In или Range
Predicate = dict[str, Any]

_NAME_MODELS = {
    "customer": Customer,
    "employee": Employee,
}


async def resolve_ids(session: AsyncSession, kind: str, substring: str) -> list[uuid.UUID]:
    """ID клиентов/сотрудников, в имени которых есть substring (без учёта регистра)."""
    model = _NAME_MODELS[kind]
    result = await session.execute(
        select(model.id).where(model.name.icontains(substring, autoescape=True))
    )
    return list(result.scalars().all())


def _utc(d: date) -> datetime:
    return local_midnight(d).astimezone(timezone.utc)


def _on_or_after(d: date) -> Range:
    return Range(gte=_utc(d))


def _before(d: date) -> Range:
    return Range(lt=_utc(d))


def _within_day(d: date) -> Range:
    return Range(gte=_utc(d), lt=_utc(d + timedelta(days=1)))


# Применяются по порядку, каждое правило перезаписывает order_date целиком
DATE_RULES: tuple[tuple[str, str, Callable[[date], Range]], ...] = (
    ("order_after_date", "orderAfterDate", _on_or_after),
    ("order_before_date", "orderBeforeDate", _before),
    ("order_date", "orderDate", _within_day),
)


async def build_order_filter(session: AsyncSession, query: OrderQuery) -> Predicate:
    predicate: Predicate = {}
    if query.customer_name:
        ids = await resolve_ids(session, "customer", query.customer_name)
        predicate["customer_id"] = In(tuple(ids))
    if query.employee_name:
        ids = await resolve_ids(session, "employee", query.employee_name)
        predicate["employee_id"] = In(tuple(ids))

    # Сначала проверяем все даты, даже те, что потом будут перезаписаны
    ranges = []
    for attr, field, rule in DATE_RULES:
        value = getattr(query, attr)
        if not value:
            continue
        d = parse_date(value, field)
        try:
            ranges.append(rule(d))
        except (OverflowError, ValueError):
            # 01/01/0001 или 31/12/9999: граница в UTC выходит за пределы datetime
            raise format_error(field) from None
    if ranges:
        predicate["order_date"] = ranges[-1]

    if query.status:
        predicate["status"] = query.status
    return predicate


def to_where_clauses(predicate: Predicate) -> list:
    """Предикат -> условия SQLAlchemy для select(Order)."""
    clauses = []
    for field, condition in predicate.items():
        column = getattr(Order, field)
        if isinstance(condition, In):
            clauses.append(column.in_(condition.values))
        elif isinstance(condition, Range):
            if condition.gte is not None:
                clauses.append(column >= condition.gte)
            if condition.lt is not None:
                clauses.append(column < condition.lt)
        else:
            clauses.append(column == condition)
    return clauses


async def find_orders(
    session: AsyncSession,
    predicate: Predicate,
    limit: int,
    offset: int = 0,
) -> list[Order]:
    q = (
        select(Order)
        .where(*to_where_clauses(predicate))
        .order_by(Order.order_date.desc(), Order.id)
        .limit(limit)
        .offset(offset)
    )
    result = await session.execute(q)
    return list(result.scalars().all())
