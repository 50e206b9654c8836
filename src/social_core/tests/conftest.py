"""
Core pytest configuration for the whole test suite.

Only what every kind of test needs lives here: logging setup and a real
database session. Domain fixtures are in tests/test_fixtures/.
"""

import os
import logging
from typing import AsyncGenerator
from urllib.parse import urlparse

# Silence chatty third-party loggers before anything configures logging
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)


import pytest
from pytest import FixtureRequest
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from social_core.config.settings import Settings, get_settings
from social_core.core.logging.builder import setup_logging, stop_queue_logging
from social_core.database.base import Base
from social_core.database.session import create_engine_from_settings, get_session_maker
import social_core.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """
    Install the service logging configuration once per session.

    dictConfig replaces root handlers, so pytest's capture handler is put back
    afterwards for tests that read caplog.
    """
    setup_logging(get_settings())

    caplog_plugin = request.config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None)
    if handler is not None:
        logging.getLogger().addHandler(handler)

    yield

    stop_queue_logging()


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for log lines."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    """
    1. TEST_DATABASE_URL environment variable (CI override)
    2. the configured test database when TESTING=true and TEST_POSTGRES_DB is set
    3. an in-memory SQLite database
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    settings = get_settings()
    if settings.TESTING and settings.TEST_POSTGRES_DB:
        return settings.DATABASE_URL

    return "sqlite+aiosqlite:///:memory:"


TEST_DATABASE_URL = get_test_database_url()
logger.info("Using test DB: %s", safe_log_db_url(TEST_DATABASE_URL))


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Fresh schema per test. Brokers commit after every call, so tables are
    dropped afterwards instead of rolling back a wrapping transaction.
    """
    settings = Settings(DATABASE_URL_OVERRIDE=TEST_DATABASE_URL)
    engine_kwargs = {}
    if TEST_DATABASE_URL.startswith("sqlite") and ":memory:" in TEST_DATABASE_URL:
        # one shared connection, otherwise every checkout sees an empty database
        engine_kwargs["poolclass"] = StaticPool

    engine = create_engine_from_settings(settings, **engine_kwargs)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture()
def session_maker(async_engine: AsyncEngine):
    return get_session_maker(async_engine)


@pytest.fixture()
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


from .test_fixtures.entity_fixtures import (  # noqa: E402,F401
    fake,
    now,
    make_post,
    make_profile,
    make_post_report,
    make_post_impression,
)
from .test_fixtures.service_fixtures import (  # noqa: E402,F401
    storage_broker_mock,
    datetime_broker_mock,
    logging_broker_mock,
    post_service,
    profile_service,
    post_report_service,
    post_impression_service,
)
