"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .models import LinkRecord


class LinkStore(ABC):
    """Abstract base class for link store operations.

    Implementations must enforce code uniqueness themselves (unique index or
    primary key) and apply click updates in a single atomic statement. The
    registry never coordinates writers in memory.

    Driver failures are raised as ``StoreUnavailable``.
    """

    def __init__(self, store_url: str):
        """Initialize store.

        Args:
            store_url: Store connection string
        """
        self.store_url = store_url

    @abstractmethod
    async def initialize(self) -> None:
        """Open resources and create the schema if enabled."""
        pass

    @abstractmethod
    async def insert_if_absent(
        self,
        code: str,
        target_url: str,
        created_at: datetime,
    ) -> Optional[LinkRecord]:
        """Insert a new link unless the code is already used.

        Args:
            code: Normalized (uppercase) code
            target_url: Target URL
            created_at: Creation timestamp (aware UTC)

        Returns:
            The stored record, or None if the code already exists
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[LinkRecord]:
        """Get the link for a code.

        Args:
            code: Normalized code

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def code_exists(self, code: str) -> bool:
        """Check if a code is already used.

        Args:
            code: Normalized code

        Returns:
            True if exists
        """
        pass

    @abstractmethod
    async def increment_click_atomic(
        self,
        code: str,
        clicked_at: datetime,
    ) -> Optional[LinkRecord]:
        """Add one click and advance the last-click time in one atomic update.

        The stored last-click time never moves backwards: a click whose update
        lands after a newer one has committed keeps the newer time.

        Args:
            code: Normalized code
            clicked_at: Time of this click (aware UTC)

        Returns:
            The updated record, or None if the code does not exist
        """
        pass

    @abstractmethod
    async def delete_by_code(self, code: str) -> bool:
        """Permanently delete a link.

        Args:
            code: Normalized code

        Returns:
            True if a record was deleted
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[LinkRecord]:
        """List all links, newest first."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
