"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shortlinks.config import Config
from shortlinks.common.logging_config import setup_logging
from shortlinks.database.base import LinkStore
from shortlinks.database.postgres import PostgresLinkStore
from shortlinks.database.sqlite import SQLiteLinkStore
from shortlinks.redirect import RedirectHandler
from shortlinks.registry import LinkRegistry
from shortlinks.shortcode import ShortCodeGenerator
from web_app import create_app


# PostgreSQL runs are opt-in: point this at a disposable database
TEST_POSTGRES_URL = os.environ.get("TEST_POSTGRES_URL")


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest_asyncio.fixture(params=["sqlite", "postgres"])
async def store(request, tmp_path, logger) -> AsyncGenerator[LinkStore, None]:
    """Create an empty store for each backend.

    SQLite lives in a temporary directory. PostgreSQL runs only when
    TEST_POSTGRES_URL is set, and its links table is emptied first.
    """
    if request.param == "sqlite":
        store = SQLiteLinkStore(db_path=tmp_path / "links.db", logger=logger)
        await store.initialize()
    else:
        if not TEST_POSTGRES_URL:
            pytest.skip("TEST_POSTGRES_URL not set")
        store = PostgresLinkStore(store_url=TEST_POSTGRES_URL, create_tables=True, logger=logger)
        await store.initialize()
        async with store._get_connection("reset") as conn:
            await conn.execute("TRUNCATE links RESTART IDENTITY")

    yield store

    await store.close()


@pytest.fixture
def mock_store():
    """Store double for asserting which store calls were (not) made."""
    return AsyncMock(spec=LinkStore)


@pytest.fixture
def code_generator():
    """Create short code generator."""
    return ShortCodeGenerator()


@pytest.fixture
def registry(store, code_generator, logger) -> LinkRegistry:
    """Create registry instance."""
    return LinkRegistry(
        store=store,
        code_generator=code_generator,
        logger=logger,
        timeout=10.0,
    )


@pytest.fixture
def redirect_handler(store, logger) -> RedirectHandler:
    """Create redirect handler instance."""
    return RedirectHandler(store=store, logger=logger, timeout=10.0)


@pytest.fixture
def config(tmp_path):
    """Test configuration."""
    return Config(
        store_url=f"sqlite:///{tmp_path / 'links.db'}",
        base_url="http://sho.rt",
    )


@pytest.fixture
def app(store, registry, redirect_handler, config):
    """Create test FastAPI app."""
    return create_app(
        store=store,
        registry=registry,
        redirect_handler=redirect_handler,
        config=config,
    )


@pytest_asyncio.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/a/b",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
