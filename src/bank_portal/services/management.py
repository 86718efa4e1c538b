"""
Employee/admin management: customer lookups for employees, employee CRUD for
admins, and the predefined admin seed run at startup.
"""

from typing import List, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..db import crud
from ..db.models import Admin, Employee, User
from ..db.session import atomic
from ..errors import DuplicatePhone, NotFound
from ..logging_config import get_logger
from ..security import hash_password

logger = get_logger("bank_portal.services.management")


async def list_users(db: AsyncSession) -> List[User]:
    return await crud.list_users(db)


async def get_user_details(db: AsyncSession, user_id) -> User:
    user = await crud.get_user_by_id(db, user_id)
    if user is None:
        logger.warning("User not found user_id=%s", user_id)
        raise NotFound("User not found")
    return user


async def list_employees(db: AsyncSession) -> List[Employee]:
    return await crud.list_employees(db)


async def create_employee(db: AsyncSession, name: str, phone: str, aadhaar: str, password: str) -> Employee:
    if await crud.get_employee_by_phone(db, phone) is not None:
        logger.warning("Employee phone already exists phone=%s", phone)
        raise DuplicatePhone("Employee with this phone already exists")

    employee = Employee(
        employee_id=uuid4(),
        name=name,
        phone=phone,
        aadhaar=aadhaar,
        password_hash=hash_password(password),
    )
    try:
        async with atomic(db):
            db.add(employee)
    except IntegrityError:
        # lost a race against a concurrent create with the same phone
        raise DuplicatePhone("Employee with this phone already exists")

    logger.info("Created employee employee_id=%s phone=%s", employee.employee_id, employee.phone)
    return employee


async def delete_employee(db: AsyncSession, employee_id) -> Employee:
    employee = await crud.get_employee_by_id(db, employee_id)
    if employee is None:
        logger.warning("Employee not found employee_id=%s", employee_id)
        raise NotFound("Employee not found")
    async with atomic(db):
        await db.delete(employee)
    logger.info("Deleted employee employee_id=%s", employee.employee_id)
    return employee


async def seed_admin(db: AsyncSession, settings: Optional[Settings] = None) -> bool:
    """
    Create the predefined admin unless one with the configured phone exists.

    Returns True when a record was written.
    """
    settings = settings or get_settings()
    if await crud.get_admin_by_phone(db, settings.admin_phone) is not None:
        logger.info("Predefined admin already exists phone=%s", settings.admin_phone)
        return False

    admin = Admin(
        admin_id=uuid4(),
        phone=settings.admin_phone,
        password_hash=hash_password(settings.admin_password),
    )
    try:
        async with atomic(db):
            db.add(admin)
    except IntegrityError:
        logger.info("Predefined admin created concurrently phone=%s", settings.admin_phone)
        return False
    logger.info("Predefined admin created phone=%s", settings.admin_phone)
    return True
