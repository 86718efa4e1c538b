from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_sessionmaker
from ..errors import Unauthorized
from ..security import Principal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async DB session dependency for FastAPI routes.
    """
    async with get_sessionmaker()() as session:
        yield session


def current_principal(request: Request) -> Principal:
    """
    The principal the auth gate attached to this request.
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise Unauthorized()
    return principal
