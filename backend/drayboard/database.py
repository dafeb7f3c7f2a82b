"""Database engine, session factory, and declarative base.

Every table lives in a single schema; there is one session dependency:
  - get_db()  → yields an AsyncSession, committed when the request succeeds
                and rolled back on any exception (one all-or-nothing write
                per request).
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase

from drayboard.config import settings


def _engine_options(url: str) -> dict:
    # SQLite (used for local runs and tests) does not accept pool sizing
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 20, "max_overflow": 10}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class Base(DeclarativeBase):
    """Declarative base for containers and yards."""
    pass


async def get_db() -> AsyncSession:
    """Yield a request-scoped session."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
