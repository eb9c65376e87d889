"""Redirect handler: resolves a code and records the click."""

import logging
from datetime import datetime, timezone
from typing import Optional

from .common.timeouts import with_timeout
from .common.validators import is_lookup_code_shape, normalize_code
from .database.base import LinkStore
from .database.models import LinkRecord
from .errors import InvalidCode, LinkNotFound


class RedirectHandler:
    """Hot path for GET /{code}.

    Lookup and click counting are one store call: the store bumps ``clicks``
    and sets ``last_clicked_at`` in a single statement and returns the updated
    record, so concurrent redirects never lose an update.
    """

    def __init__(
        self,
        store: LinkStore,
        logger: Optional[logging.Logger] = None,
        timeout: Optional[float] = None,
    ):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout

    async def resolve(self, code: str, timeout: Optional[float] = None) -> LinkRecord:
        """Count a click on ``code`` and return the updated link.

        Args:
            code: Inbound code, any case
            timeout: Optional timeout override in seconds

        Returns:
            Updated record; ``target_url`` is the redirect target

        Raises:
            InvalidCode: If the code is shorter than 3 characters
            LinkNotFound: If no link has this code
            StoreUnavailable: On store failure or timeout
        """
        code = normalize_code(code)
        if not is_lookup_code_shape(code):
            raise InvalidCode()

        clicked_at = datetime.now(timezone.utc)

        record = await with_timeout(
            self.store.increment_click_atomic(code, clicked_at),
            self.timeout if timeout is None else timeout,
        )
        if record is None:
            self.logger.debug(f"Redirect for unknown code: {code}")
            raise LinkNotFound()

        self.logger.debug(f"Redirect {code} -> {record.target_url} (clicks={record.clicks})")
        return record
