"""
Зависимости FastAPI: текущий сотрудник из JWT, проверка ролей, пагинация.
"""
import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from backoffice.core.security import decode_access_token
from backoffice.database.connection import get_db_session
from backoffice.database.models import Employee

security = HTTPBearer(auto_error=False)


def _token_employee_id(payload: dict | None) -> uuid.UUID | None:
    if not payload or "eid" not in payload:
        return None
    try:
        return uuid.UUID(payload["eid"])
    except (ValueError, TypeError, AttributeError):
        return None


async def get_current_employee(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    session: AsyncSession = Depends(get_db_session),
) -> Employee:
    """Текущий сотрудник из Bearer JWT. Иначе 401."""
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    employee_id = _token_employee_id(payload)
    if employee_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    employee = await session.get(Employee, employee_id)
    if not employee:
        raise HTTPException(status_code=401, detail="User not found")
    if employee.status and employee.status.lower() != "active":
        raise HTTPException(status_code=403, detail="User is not active")
    return employee


def require_roles(*roles: str):
    """Зависимость: роль сотрудника должна входить в roles. Иначе 403."""
    allowed = {r.lower() for r in roles}

    def checker(employee: Employee = Depends(get_current_employee)) -> Employee:
        if (employee.role or "").lower() not in allowed:
            raise HTTPException(status_code=403, detail="Not authorized")
        return employee

    return checker


@dataclass
class Pagination:
    limit: int
    start_index: int


def get_pagination(
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT, description="Количество записей на странице"),
    start_index: int = Query(0, ge=0, alias="startIndex", description="Смещение для пагинации"),
) -> Pagination:
    return Pagination(limit=limit, start_index=start_index)
