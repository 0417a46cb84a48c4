"""
Авторизация сотрудников: логин + пароль (проверка по БД), возврат JWT.
Эндпоинт /auth/me — кто сейчас вошёл (по токену).
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.deps import get_current_employee
from backoffice.core.security import verify_password, create_access_token
from backoffice.database.connection import get_db_session
from backoffice.database.models import Employee
from backoffice.schemas import EmployeeResponse, LoginRequest, LoginResponse

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Вход по логину и паролю. Пароль проверяется по хешу в БД. Возвращает JWT."""
    result = await session.execute(
        select(Employee).where(Employee.login == body.login)
    )
    employee = result.scalar_one_or_none()
    if not employee:
        raise HTTPException(status_code=401, detail="Invalid login or password")
    if employee.status and employee.status.lower() != "active":
        raise HTTPException(status_code=403, detail="User is not active")
    if not verify_password(body.password, employee.password):
        raise HTTPException(status_code=401, detail="Invalid login or password")
    token = create_access_token(employee)
    return LoginResponse(access_token=token, user=EmployeeResponse.model_validate(employee))


@router.get("/auth/me", response_model=EmployeeResponse)
async def me(employee: Employee = Depends(get_current_employee)):
    """Текущий сотрудник по токену."""
    return EmployeeResponse.model_validate(employee)
