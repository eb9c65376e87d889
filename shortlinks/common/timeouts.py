"""Request-scoped time limits for store calls."""

import asyncio
from typing import Awaitable, Optional, TypeVar

from ..errors import StoreUnavailable

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """Await a store call, failing with StoreUnavailable after ``timeout`` seconds.

    A ``None`` timeout waits indefinitely. The awaited call is cancelled on
    expiry; store writes are single statements, so a cancelled write is either
    fully applied or not at all.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as e:
        raise StoreUnavailable("Link store did not respond in time") from e
