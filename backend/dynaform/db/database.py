"""
Async database access.

One engine per process, built from `settings.async_database_url`. Request
handlers get a session through `get_db`; startup code and the seeding CLI
use `session_scope()`.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from dynaform.core.config import settings
from dynaform.core.logging import db_logger

Base = declarative_base()

async_engine = create_async_engine(settings.async_database_url, echo=settings.DEBUG)
async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Session that commits when the block succeeds and rolls back otherwise."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncIterator[AsyncSession]:
    async with session_scope() as session:
        yield session


async def create_tables(engine: Optional[AsyncEngine] = None) -> None:
    engine = engine or async_engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    db_logger.info("Schema ready", tables=sorted(Base.metadata.tables))


async def ping(db: AsyncSession) -> None:
    """One round-trip to the database; raises when it cannot be reached."""
    await db.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    await async_engine.dispose()
