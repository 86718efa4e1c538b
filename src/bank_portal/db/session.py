from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from ..config import get_settings

Base = declarative_base()

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker] = None


def configure_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """
    (Re)build the async engine and session factory.

    Called lazily on first use with DATABASE_URL from settings; tests call it
    directly to point the app at a throwaway database.
    """
    global engine, AsyncSessionLocal
    if database_url is None or echo is None:
        settings = get_settings()
        database_url = database_url or settings.database_url
        echo = settings.db_echo if echo is None else echo

    kwargs = {"echo": echo, "future": True}
    if database_url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        kwargs["poolclass"] = NullPool
    engine = create_async_engine(database_url, **kwargs)
    AsyncSessionLocal = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    return engine


def get_engine() -> AsyncEngine:
    if engine is None:
        configure_engine()
    return engine


def get_sessionmaker() -> async_sessionmaker:
    if AsyncSessionLocal is None:
        configure_engine()
    return AsyncSessionLocal


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Commit everything done inside the block as one unit, or roll it all back.
    """
    try:
        yield db
        await db.commit()
    except BaseException:
        await db.rollback()
        raise


async def create_all() -> None:
    # models must be imported so their tables are registered on Base
    from . import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None
