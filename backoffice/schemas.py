"""
Pydantic-схемы запросов и ответов API (поля в camelCase через alias).
"""
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backoffice.database.models import OrderStatus


class OrderLineIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: UUID = Field(..., alias="productId", description="ID товара")
    quantity: int = Field(..., gt=0, description="Количество, > 0")


class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_id: UUID = Field(..., alias="customerId")
    employee_id: UUID = Field(..., alias="employeeId")
    order_details: List[OrderLineIn] = Field(..., alias="orderDetails", min_length=1)


class OrderUpdate(BaseModel):
    """Тело PATCH: только разрешённые поля, остальное игнорируется."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: Optional[UUID] = Field(default=None, alias="customerId")
    employee_id: Optional[UUID] = Field(default=None, alias="employeeId")
    # DD/MM/YYYY, формат проверяется при применении
    order_date: Optional[str] = Field(default=None, alias="orderDate")
    status: Optional[OrderStatus] = None
    total: Optional[Decimal] = Field(default=None, ge=0)
    delete_order_details: Optional[List[UUID]] = Field(default=None, alias="deleteOrderDetails")
    new_order_details: Optional[List[OrderLineIn]] = Field(default=None, alias="newOrderDetails")


class LoginRequest(BaseModel):
    login: str
    password: str


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    login: str
    name: str
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: EmployeeResponse
