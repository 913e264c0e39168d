from typing import AsyncGenerator
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from tacom.core.config import settings

# Async SQLModel engine + session
engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True)
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db() -> None:
    """Run SQLModel metadata.create_all() using an async connection.
    Used for the offline SQLite database and local dev when
    CREATE_TABLES_ON_START is enabled.
    """
    # registers every table on SQLModel.metadata
    import tacom.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an AsyncSession."""
    async with AsyncSessionLocal() as session:
        yield session
