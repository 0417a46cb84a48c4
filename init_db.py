"""
Создание схемы и таблиц заказов, опционально и администратора.
Использование: python init_db.py [--admin-login admin --admin-password secret --admin-name "Admin"]
"""
import argparse
import asyncio
import logging
import sys

from sqlalchemy import select

from backoffice.core.security import hash_password
from backoffice.database.connection import cleanup, get_db, init_models
from backoffice.database.models import Employee, EmployeeRole

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("init_db")


async def seed_admin(login: str, password: str, name: str) -> None:
    """Создать сотрудника с ролью admin, если такого логина ещё нет."""
    async with get_db() as session:
        result = await session.execute(select(Employee).where(Employee.login == login))
        if result.scalar_one_or_none():
            logger.info("Employee %s already exists, skipped", login)
            return
        session.add(
            Employee(
                login=login,
                name=name,
                password=hash_password(password),
                role=EmployeeRole.ADMIN.value,
                status="active",
            )
        )
        await session.commit()
        logger.info("Admin %s created", login)


async def main(args: argparse.Namespace) -> None:
    try:
        await init_models()
        if args.admin_login:
            await seed_admin(args.admin_login, args.admin_password, args.admin_name)
    finally:
        await cleanup()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create order back office tables")
    parser.add_argument("--admin-login")
    parser.add_argument("--admin-password")
    parser.add_argument("--admin-name", default="Administrator")
    args = parser.parse_args()
    if args.admin_login and not args.admin_password:
        print("Usage: python init_db.py --admin-login <login> --admin-password <password>")
        sys.exit(1)
    asyncio.run(main(args))
