"""
Database connection, session and unit-of-work management.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from status_engine.core.config import get_settings
from status_engine.repositories.sql import SqlUnitOfWork

settings = get_settings()

_engine_kwargs = {}
if settings.database_isolation_level:
    _engine_kwargs["isolation_level"] = settings.database_isolation_level

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_kwargs,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db():
    """Create all tables (development only)."""
    import status_engine.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


@asynccontextmanager
async def unit_of_work(
    session_factory: Optional[async_sessionmaker] = None,
) -> AsyncGenerator[SqlUnitOfWork, None]:
    """Open one transaction: commit on success, roll back on any exception."""
    factory = session_factory or async_session_factory
    async with factory() as session:
        uow = SqlUnitOfWork(session)
        try:
            yield uow
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_uow() -> AsyncGenerator[SqlUnitOfWork, None]:
    """FastAPI dependency: one unit of work per request."""
    async with unit_of_work() as uow:
        yield uow
