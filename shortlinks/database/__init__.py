"""Link store layer."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import LinkStore
from .models import LinkRecord
from .postgres import PostgresLinkStore
from .sqlite import SQLiteLinkStore

__all__ = [
    "LinkStore",
    "LinkRecord",
    "PostgresLinkStore",
    "SQLiteLinkStore",
    "create_link_store",
]


def create_link_store(
    store_url: str,
    create_tables: bool = True,
    pool_max_size: int = 10,
    logger: Optional[logging.Logger] = None,
) -> LinkStore:
    """Create a store for a connection URL.

    Args:
        store_url: postgresql://..., postgres://... or sqlite:///path.db
        create_tables: Create the links table on initialize
        pool_max_size: Maximum pool size (PostgreSQL only)
        logger: Optional logger

    Returns:
        Uninitialized store instance

    Raises:
        ValueError: If the URL scheme is not supported
    """
    scheme = urlparse(store_url).scheme.lower()

    if scheme in ("postgresql", "postgres"):
        return PostgresLinkStore(
            store_url=store_url,
            pool_max_size=pool_max_size,
            create_tables=create_tables,
            logger=logger,
        )
    if scheme == "sqlite":
        return SQLiteLinkStore.from_url(
            store_url,
            create_tables=create_tables,
            logger=logger,
        )

    raise ValueError(f"Unsupported store URL scheme: {scheme or '(none)'}")
