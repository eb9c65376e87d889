"""FastAPI application factory."""

import time

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from shortlinks import __version__
from shortlinks.errors import LinkError
from .api import api_router
from .web import web_router
from .errors import link_error_handler, validation_error_handler
from .middleware.logging import LoggingMiddleware


def create_app(
    store,
    registry,
    redirect_handler,
    config,
    lifespan=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Instances may be None when a ``lifespan`` builds them at startup.

    Args:
        store: Link store instance
        registry: Link registry instance
        redirect_handler: Redirect handler instance
        config: Configuration instance
        lifespan: Optional lifespan context manager

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Shortlinks",
        description="Short links with click counting",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # Store instances in app state for access in routes
    app.state.store = store
    app.state.registry = registry
    app.state.redirect_handler = redirect_handler
    app.state.config = config
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(LinkError, link_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Order matters: /links and /healthz must win over the catch-all /{code}
    app.include_router(api_router, tags=["Links"])
    app.include_router(web_router, tags=["Redirect"])

    return app
