"""
Заказы и позиции заказа (orders, order_details). Доступ: роли employee и admin.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.deps import Pagination, get_pagination, require_roles
from backoffice.core.errors import OrderNotFound
from backoffice.database.connection import get_db_session
from backoffice.database.models import Employee, EmployeeRole, Order
from backoffice.schemas import OrderCreate, OrderUpdate
from backoffice.services import orders as order_service
from backoffice.services.order_filters import OrderQuery, build_order_filter, find_orders

logger = logging.getLogger(__name__)

router = APIRouter()

staff_only = require_roles(EmployeeRole.EMPLOYEE.value, EmployeeRole.ADMIN.value)


def _iso_utc(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def _order_out(order: Order) -> dict:
    return {
        "id": str(order.id),
        "customerId": str(order.customer_id) if order.customer_id else None,
        "employeeId": str(order.employee_id) if order.employee_id else None,
        "orderDate": _iso_utc(order.order_date),
        "status": order.status,
        "orderDetails": [str(d.id) for d in order.order_details],
        "total": float(order.total) if order.total is not None else 0,
    }


def get_order_query(
    customer_name: str | None = Query(None, alias="customerName", description="Подстрока имени клиента"),
    employee_name: str | None = Query(None, alias="employeeName", description="Подстрока имени сотрудника"),
    order_date: str | None = Query(None, alias="orderDate", description="За день, DD/MM/YYYY"),
    order_before_date: str | None = Query(None, alias="orderBeforeDate", description="Раньше даты, DD/MM/YYYY"),
    order_after_date: str | None = Query(None, alias="orderAfterDate", description="Начиная с даты, DD/MM/YYYY"),
    status: str | None = Query(None, description="Статус заказа (точное совпадение)"),
) -> OrderQuery:
    return OrderQuery(
        customer_name=customer_name,
        employee_name=employee_name,
        order_date=order_date,
        order_before_date=order_before_date,
        order_after_date=order_after_date,
        status=status,
    )


@router.get("/orders")
async def list_orders(
    query: OrderQuery = Depends(get_order_query),
    page: Pagination = Depends(get_pagination),
    session: AsyncSession = Depends(get_db_session),
    _: Employee = Depends(staff_only),
):
    """Список заказов с фильтрами. Из дат действует одна: orderDate > orderBeforeDate > orderAfterDate."""
    predicate = await build_order_filter(session, query)
    orders = await find_orders(session, predicate, limit=page.limit, offset=page.start_index)
    return {"results": [_order_out(o) for o in orders], "success": True}


@router.post("/orders")
async def create_order(
    body: OrderCreate,
    session: AsyncSession = Depends(get_db_session),
    user: Employee = Depends(staff_only),
):
    """Создать заказ с позициями. Цена позиции берётся из товара на момент создания."""
    order = await order_service.create_order(session, body)
    logger.info("Order %s added by %s", order.id, user.login)
    return {"msg": "Order added", "order": _order_out(order)}


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    session: AsyncSession = Depends(get_db_session),
    _: Employee = Depends(staff_only),
):
    oid = order_service.parse_order_id(order_id)
    try:
        order = await order_service.get_order(session, oid)
    except OrderNotFound as e:
        return JSONResponse(status_code=404, content={"error": e.message, "success": False})
    return {"order": _order_out(order), "success": True}


@router.patch("/orders/{order_id}")
async def update_order(
    order_id: str,
    body: OrderUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: Employee = Depends(staff_only),
):
    """Изменить заказ: статус, клиент, сотрудник, дата (DD/MM/YYYY), сумма; удалить/добавить позиции."""
    oid = order_service.parse_order_id(order_id)
    order = await order_service.apply_order_update(session, oid, body)
    logger.info("Order %s updated by %s", order.id, user.login)
    return {"msg": "Order updated", "order": _order_out(order)}


@router.delete("/orders/{order_id}")
async def delete_order(
    order_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: Employee = Depends(staff_only),
):
    oid = order_service.parse_order_id(order_id)
    await order_service.delete_order(session, oid)
    logger.info("Order %s deleted by %s", oid, user.login)
    return {"msg": "Order deleted"}
