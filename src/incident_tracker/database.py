from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from incident_tracker.config import get_settings

settings = get_settings()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(async_engine: AsyncEngine) -> None:
    """Replace SQLite's ASCII-only lower() so search folds case like Python does."""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)


engine = create_async_engine(settings.database_url, echo=False)
register_sqlite_functions(engine)
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
