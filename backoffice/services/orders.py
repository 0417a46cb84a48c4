"""
Заказы: создание, получение, частичное обновление (PATCH) и удаление.

Каждая операция работает в одной сессии: при ошибке до commit ничего не сохраняется.
"""
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import InvalidFormat, OrderNotFound, ProductNotFound
from backoffice.database.models import Order, OrderDetail, OrderStatus, Product
from backoffice.schemas import OrderCreate, OrderUpdate
from backoffice.services.dates import parse_date, utc_midnight

logger = logging.getLogger(__name__)


def parse_order_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except (ValueError, TypeError):
        raise InvalidFormat("Invalid order id") from None


async def get_order(session: AsyncSession, order_id: uuid.UUID) -> Order:
    order = await session.get(Order, order_id)
    if order is None:
        raise OrderNotFound()
    return order


def _new_detail(product: Product, quantity: int) -> OrderDetail:
    # sell_price копируется из товара один раз и дальше не меняется
    return OrderDetail(
        id=uuid.uuid4(),
        product_id=product.id,
        quantity=quantity,
        sell_price=product.sell_price,
    )


async def create_order(session: AsyncSession, payload: OrderCreate) -> Order:
    """Новый заказ: статус Pending, сумма 0, дата: сейчас (UTC)."""
    order = Order(
        id=uuid.uuid4(),
        customer_id=payload.customer_id,
        employee_id=payload.employee_id,
        order_date=datetime.now(timezone.utc),
        status=OrderStatus.PENDING.value,
        total=Decimal("0"),
    )
    for line in payload.order_details:
        product = await session.get(Product, line.product_id)
        if product is None:
            logger.info("Order rejected: product %s not found", line.product_id)
            raise ProductNotFound()
        order.order_details.append(_new_detail(product, line.quantity))
    session.add(order)
    await session.commit()
    logger.info("Order %s created with %d line(s)", order.id, len(order.order_details))
    return order


def _assign(attr: str, nullable: bool = True) -> Callable[[Order, Any], None]:
    def handler(order: Order, value: Any) -> None:
        if value is None and not nullable:
            return
        setattr(order, attr, value)

    return handler


def _assign_order_date(order: Order, value: str | None) -> None:
    if value is None:
        return
    order.order_date = utc_midnight(parse_date(value, "orderDate"))


def _assign_status(order: Order, value: OrderStatus | None) -> None:
    if value is None:
        return
    order.status = value.value


# Поля заказа, которые можно менять через PATCH, и как их применять
UPDATABLE_FIELDS: dict[str, Callable[[Order, Any], None]] = {
    "customer_id": _assign("customer_id"),
    "employee_id": _assign("employee_id"),
    "order_date": _assign_order_date,
    "status": _assign_status,
    "total": _assign("total", nullable=False),
}


async def apply_order_update(session: AsyncSession, order_id: uuid.UUID, patch: OrderUpdate) -> Order:
    """
    Порядок: поля заказа -> удаление позиций (deleteOrderDetails) -> новые позиции (newOrderDetails) -> commit.
    Чужие и несуществующие ID позиций пропускаются, позиции с несуществующим товаром тоже.
    """
    order = await get_order(session, order_id)

    for field, handler in UPDATABLE_FIELDS.items():
        if field in patch.model_fields_set:
            handler(order, getattr(patch, field))

    if patch.delete_order_details:
        by_id = {detail.id: detail for detail in order.order_details}
        for detail_id in patch.delete_order_details:
            detail = by_id.pop(detail_id, None)
            if detail is None:
                continue
            order.order_details.remove(detail)
            await session.delete(detail)

    if patch.new_order_details:
        for line in patch.new_order_details:
            product = await session.get(Product, line.product_id)
            if product is None:
                logger.info("Order %s: product %s not found, line skipped", order.id, line.product_id)
                continue
            order.order_details.append(_new_detail(product, line.quantity))

    await session.commit()
    logger.info("Order %s updated", order.id)
    return order


async def delete_order(session: AsyncSession, order_id: uuid.UUID) -> None:
    """Удалить заказ вместе с позициями."""
    order = await get_order(session, order_id)
    await session.delete(order)
    await session.commit()
    logger.info("Order %s deleted", order_id)
