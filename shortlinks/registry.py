"""Link registry: code allocation, custom-code validation and link management."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from .common.timeouts import with_timeout
from .common.validators import (
    is_lookup_code_shape,
    is_valid_custom_code,
    is_valid_url,
    normalize_code,
)
from .database.base import LinkStore
from .database.models import LinkRecord
from .errors import (
    CodeAlreadyTaken,
    ExhaustedAttempts,
    InvalidCode,
    InvalidCodeFormat,
    InvalidURL,
    LinkNotFound,
)
from .shortcode import ShortCodeGenerator


DEFAULT_MAX_GENERATION_ATTEMPTS = 50


class LinkRegistry:
    """The single authority for turning creation requests into stored links.

    Holds no state of its own beyond its collaborators, so any number of
    registries (in one or many processes) can share the same store. All races
    on a code are settled by the store's unique constraint.
    """

    def __init__(
        self,
        store: LinkStore,
        code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_generation_attempts: int = DEFAULT_MAX_GENERATION_ATTEMPTS,
        timeout: Optional[float] = None,
    ):
        """Initialize link registry.

        Args:
            store: Link store instance
            code_generator: Optional short code generator
            logger: Optional logger
            max_generation_attempts: Maximum codes tried per generated create
            timeout: Default per-operation timeout in seconds (None = no limit)
        """
        if max_generation_attempts < 1:
            raise ValueError("max_generation_attempts must be at least 1")
        self.store = store
        self.generator = code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_generation_attempts = max_generation_attempts
        self.timeout = timeout

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.timeout if timeout is None else timeout

    @staticmethod
    def _validate_url(target_url: str) -> str:
        is_valid, error = is_valid_url(target_url)
        if not is_valid:
            raise InvalidURL(error)
        return target_url.strip()

    async def create(
        self,
        target_url: str,
        code: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> LinkRecord:
        """Create a link with a custom code if one is given, else a generated one."""
        if code is not None and code.strip():
            return await self.create_with_custom_code(target_url, code, timeout=timeout)
        return await self.create_with_generated_code(target_url, timeout=timeout)

    async def create_with_generated_code(
        self,
        target_url: str,
        timeout: Optional[float] = None,
    ) -> LinkRecord:
        """Create a link under a fresh random code.

        Args:
            target_url: Absolute http(s) URL
            timeout: Optional timeout override in seconds

        Returns:
            The stored record

        Raises:
            InvalidURL: If the URL is malformed
            ExhaustedAttempts: If every generated code collided
            StoreUnavailable: On store failure or timeout
        """
        target_url = self._validate_url(target_url)
        return await with_timeout(self._insert_generated(target_url), self._timeout(timeout))

    async def _insert_generated(self, target_url: str) -> LinkRecord:
        for attempt in range(1, self.max_generation_attempts + 1):
            code = self.generator.generate()

            if await self.store.code_exists(code):
                self.logger.debug(f"Generated code {code} already exists (attempt {attempt})")
                continue

            record = await self.store.insert_if_absent(code, target_url, datetime.now(timezone.utc))
            if record is None:
                # Lost a race for the same code; try another
                self.logger.debug(f"Generated code {code} taken concurrently (attempt {attempt})")
                continue

            self.logger.info(f"Created link: {record.code} -> {target_url}")
            return record

        self.logger.error(
            f"Failed to generate a unique code after {self.max_generation_attempts} attempts"
        )
        raise ExhaustedAttempts(
            f"Failed to generate unique code after {self.max_generation_attempts} attempts"
        )

    async def create_with_custom_code(
        self,
        target_url: str,
        requested_code: str,
        timeout: Optional[float] = None,
    ) -> LinkRecord:
        """Create a link under a caller-chosen code.

        The code is trimmed and uppercased before validation and storage.

        Args:
            target_url: Absolute http(s) URL
            requested_code: Code requested by the caller
            timeout: Optional timeout override in seconds

        Returns:
            The stored record

        Raises:
            InvalidURL: If the URL is malformed
            InvalidCodeFormat: If the code is not 6-12 letters/digits or reserved
            CodeAlreadyTaken: If the code is already used
            StoreUnavailable: On store failure or timeout
        """
        target_url = self._validate_url(target_url)

        code = normalize_code(requested_code)
        is_valid, error = is_valid_custom_code(code)
        if not is_valid:
            raise InvalidCodeFormat(error)

        return await with_timeout(self._insert_custom(code, target_url), self._timeout(timeout))

    async def _insert_custom(self, code: str, target_url: str) -> LinkRecord:
        if await self.store.code_exists(code):
            raise CodeAlreadyTaken()

        record = await self.store.insert_if_absent(code, target_url, datetime.now(timezone.utc))
        if record is None:
            self.logger.info(f"Custom code {code} taken by a concurrent create")
            raise CodeAlreadyTaken()

        self.logger.info(f"Created link: {code} -> {target_url}")
        return record

    async def lookup(self, code: str, timeout: Optional[float] = None) -> LinkRecord:
        """Get a link without counting a click.

        Raises:
            InvalidCode: If the code is shorter than 3 characters
            LinkNotFound: If no link has this code
            StoreUnavailable: On store failure or timeout
        """
        code = normalize_code(code)
        if not is_lookup_code_shape(code):
            raise InvalidCode()

        record = await with_timeout(self.store.find_by_code(code), self._timeout(timeout))
        if record is None:
            self.logger.debug(f"Code not found: {code}")
            raise LinkNotFound()
        return record

    async def list_links(self, timeout: Optional[float] = None) -> List[LinkRecord]:
        """List all links, newest first."""
        return await with_timeout(self.store.list_all(), self._timeout(timeout))

    async def delete(self, code: str, timeout: Optional[float] = None) -> None:
        """Permanently delete a link.

        Raises:
            LinkNotFound: If no link has this code (including repeat deletes)
            StoreUnavailable: On store failure or timeout
        """
        code = normalize_code(code)
        deleted = await with_timeout(self.store.delete_by_code(code), self._timeout(timeout))
        if not deleted:
            raise LinkNotFound()
        self.logger.info(f"Deleted link: {code}")
