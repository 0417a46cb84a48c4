"""
Модели SQLAlchemy: заказы, позиции заказа и связанные справочники (клиенты, сотрудники, товары).
"""
import enum
import uuid

from sqlalchemy import (
    Column,
    String,
    Integer,
    Numeric,
    Text,
    ForeignKey,
    TIMESTAMP,
    Uuid,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import declarative_base, relationship

from backoffice.core.config import DATABASE_SCHEMA

Base = declarative_base()


def _fk(target: str) -> str:
    return f"{DATABASE_SCHEMA}.{target}"


class EmployeeRole(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = {"schema": DATABASE_SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    address = Column(Text, nullable=True)


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = {"schema": DATABASE_SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    login = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=True)  # bcrypt-хеш
    role = Column(String, nullable=False, default=EmployeeRole.EMPLOYEE.value)
    status = Column(String, nullable=True, default="active")


class Product(Base):
    __tablename__ = "products"
    __table_args__ = {"schema": DATABASE_SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    sell_price = Column(Numeric(18, 2), nullable=False)
    unit = Column(String, nullable=True)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = {"schema": DATABASE_SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid, ForeignKey(_fk("customers.id")), nullable=True)
    employee_id = Column(Uuid, ForeignKey(_fk("employees.id")), nullable=True)
    # Хранится в UTC
    order_date = Column(TIMESTAMP(timezone=True), nullable=False)
    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)
    total = Column(Numeric(18, 2), nullable=False, default=0)

    # Порядок позиций сохраняется в OrderDetail.position
    order_details = relationship(
        "OrderDetail",
        back_populates="order",
        order_by="OrderDetail.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderDetail(Base):
    __tablename__ = "order_details"
    __table_args__ = {"schema": DATABASE_SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey(_fk("orders.id"), ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey(_fk("products.id")), nullable=False)
    quantity = Column(Integer, nullable=False)
    # Цена на момент заказа, не пересчитывается из Product
    sell_price = Column(Numeric(18, 2), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    order = relationship("Order", back_populates="order_details")
