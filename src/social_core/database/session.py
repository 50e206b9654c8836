from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from ..config.settings import Settings, get_settings


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    SQLite ignores REFERENCES clauses unless the pragma is set per connection.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine_from_settings(settings: Settings | None = None, **engine_kwargs) -> AsyncEngine:
    """
    Build the AsyncEngine for `settings.DATABASE_URL`.

    Extra keyword arguments are passed to `create_async_engine` (tests use this
    to pass a StaticPool for in-memory SQLite).
    """
    settings = settings or get_settings()
    url = make_url(settings.DATABASE_URL)

    kwargs = {"echo": settings.SQLALCHEMY_ECHO}
    if not url.drivername.startswith("sqlite"):
        # Connection health checks; pointless for SQLite files
        kwargs["pool_pre_ping"] = True
    kwargs.update(engine_kwargs)

    engine = create_async_engine(url, **kwargs)
    if url.drivername.startswith("sqlite"):
        enable_sqlite_foreign_keys(engine)
    return engine


def get_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps returned entities readable after the broker commits
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session and make sure it is closed afterwards.

    Usage:
        async for session in get_async_session(session_maker):
            service = build_post_service(session)
    """
    async with session_maker() as session:
        yield session
