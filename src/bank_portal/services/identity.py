"""
Registration and login for the three principal kinds.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import crud
from ..db.models import User
from ..db.session import atomic
from ..errors import DuplicatePhone, NotFound, Unauthorized
from ..logging_config import get_logger
from ..security import hash_password, issue_token, verify_password
from . import accounts

logger = get_logger("bank_portal.services.identity")

_LOOKUPS = {
    "user": (crud.get_user_by_phone, "user_id"),
    "employee": (crud.get_employee_by_phone, "employee_id"),
    "admin": (crud.get_admin_by_phone, "admin_id"),
}


@dataclass
class LoginResult:
    token: str
    role: str
    principal: Any


async def register_user(
    db: AsyncSession,
    name: str,
    phone: str,
    aadhaar: str,
    password: str,
    account_type: str = "savings",
    initial_deposit: Optional[Decimal] = None,
) -> User:
    opening = accounts.normalize_amount(initial_deposit) if initial_deposit else None

    if await crud.get_user_by_phone(db, phone) is not None:
        logger.warning("User phone already exists phone=%s", phone)
        raise DuplicatePhone("User with this phone already exists")

    user = User(
        user_id=uuid4(),
        name=name,
        phone=phone,
        aadhaar=aadhaar,
        password_hash=hash_password(password),
        account_type=account_type,
        balance=opening or Decimal("0.00"),
    )
    # Account and its opening deposit record are written together
    try:
        async with atomic(db):
            db.add(user)
            if opening is not None:
                await db.flush()
                db.add(accounts.opening_entry(user, opening))
    except IntegrityError:
        raise DuplicatePhone("User with this phone already exists")
    logger.info("Registered user user_id=%s phone=%s opening=%s", user.user_id, user.phone, opening)
    return user


async def login(db: AsyncSession, role: str, phone: str, password: str) -> LoginResult:
    lookup, id_attr = _LOOKUPS[role]
    principal = await lookup(db, (phone or "").strip())
    if principal is None or not verify_password(password, principal.password_hash):
        logger.warning("Login failed role=%s phone=%s", role, phone)
        raise Unauthorized("Invalid credentials")

    principal_id = getattr(principal, id_attr)
    logger.info("Login successful role=%s id=%s", role, principal_id)
    return LoginResult(token=issue_token(principal_id, role), role=role, principal=principal)


async def get_profile(db: AsyncSession, user_id) -> User:
    user = await crud.get_user_by_id(db, user_id)
    if user is None:
        raise NotFound("User not found")
    return user
