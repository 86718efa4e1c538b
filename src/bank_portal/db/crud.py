from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Admin, Employee, Transaction, User


def parse_uuid(value) -> Optional[UUID]:
    """
    Coerce a path/claim value to UUID; None when it is not one.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


async def get_user_by_id(db: AsyncSession, user_id) -> Optional[User]:
    uid = parse_uuid(user_id)
    if uid is None:
        return None
    res = await db.execute(select(User).where(User.user_id == uid))
    return res.scalars().first()


async def get_user_by_phone(db: AsyncSession, phone: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.phone == phone))
    return res.scalars().first()


async def list_users(db: AsyncSession) -> List[User]:
    res = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(res.scalars().all())


async def get_employee_by_id(db: AsyncSession, employee_id) -> Optional[Employee]:
    eid = parse_uuid(employee_id)
    if eid is None:
        return None
    res = await db.execute(select(Employee).where(Employee.employee_id == eid))
    return res.scalars().first()


async def get_employee_by_phone(db: AsyncSession, phone: str) -> Optional[Employee]:
    res = await db.execute(select(Employee).where(Employee.phone == phone))
    return res.scalars().first()


async def list_employees(db: AsyncSession) -> List[Employee]:
    res = await db.execute(select(Employee).order_by(Employee.created_at.desc()))
    return list(res.scalars().all())


async def get_admin_by_phone(db: AsyncSession, phone: str) -> Optional[Admin]:
    res = await db.execute(select(Admin).where(Admin.phone == phone))
    return res.scalars().first()


async def get_transactions_for_user(db: AsyncSession, user_id) -> List[Transaction]:
    uid = parse_uuid(user_id)
    if uid is None:
        return []
    q = (
        select(Transaction)
        .where(Transaction.user_id == uid)
        .order_by(Transaction.created_at.desc(), Transaction.seq.desc())
    )
    res = await db.execute(q)
    return list(res.scalars().all())
