"""
Main entry point for the shortlinks service.

Concurrency: requests are served concurrently via async I/O (FastAPI + an
asyncpg pool or aiosqlite). Set WORKERS > 1 for multi-process scaling; every
worker opens its own store connections, and all same-code races are settled
by the store, so workers share nothing in memory.

Usage:
    python -m shortlinks.app

Environment variables:
    STORE_URL - Link store URL (postgresql://... or sqlite:///links.db)
    STORE_CREATE_TABLES - Create the links table on startup (default true)
    STORE_TIMEOUT_SECONDS - Per-request store time limit
    BASE_URL - Public base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from shortlinks.config import Config, load_config
from shortlinks.common.logging_config import setup_logging
from shortlinks.database import create_link_store
from shortlinks.redirect import RedirectHandler
from shortlinks.registry import LinkRegistry
from shortlinks.shortcode import ShortCodeGenerator
from web_app import create_app


def build_lifespan(config: Config, logger: logging.Logger):
    """Build the lifespan that owns the store for the life of the process."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting shortlinks service...")

        store = create_link_store(
            config.store_url,
            create_tables=config.store_create_tables,
            pool_max_size=config.store_pool_max_size,
            logger=logger,
        )
        await store.initialize()

        registry = LinkRegistry(
            store=store,
            code_generator=ShortCodeGenerator(length=config.code_length),
            logger=logger,
            max_generation_attempts=config.max_generation_attempts,
            timeout=config.store_timeout_seconds,
        )
        redirect_handler = RedirectHandler(
            store=store,
            logger=logger,
            timeout=config.store_timeout_seconds,
        )

        app.state.store = store
        app.state.registry = registry
        app.state.redirect_handler = redirect_handler

        logger.info("Service started successfully")

        try:
            yield
        finally:
            logger.info("Shutting down shortlinks service...")
            await store.close()
            logger.info("Service stopped")

    return lifespan


def create_application() -> FastAPI:
    """Load configuration and build the app; also used as the uvicorn factory."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    return create_app(
        store=None,  # Set in lifespan
        registry=None,
        redirect_handler=None,
        config=config,
        lifespan=build_lifespan(config, logger),
    )


def main():
    """Main entry point."""
    app = create_application()
    config = app.state.config
    logger = logging.getLogger("shortlinks")

    logger.info("Shortlinks Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'store_url'})}")

    if config.workers > 1:
        # Multiple processes need an import string so each worker builds its own app
        uvicorn.run(
            "shortlinks.app:create_application",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
        )
        return

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    # Setup signal handlers for graceful shutdown
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except OSError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
