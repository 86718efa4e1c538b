from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.crud import get_transactions_for_user, get_user_by_id
from ..db.models import Transaction
from ..errors import NotFound


async def get_history(db: AsyncSession, user_id) -> List[Transaction]:
    """
    All transaction records for a user, newest first.
    """
    if await get_user_by_id(db, user_id) is None:
        raise NotFound("User not found")
    return await get_transactions_for_user(db, user_id)
