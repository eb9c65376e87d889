"""SQLite implementation of the link store."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import urlparse

import aiosqlite

from ..errors import StoreUnavailable
from .base import LinkStore
from .models import LinkRecord


_COLUMNS = "code, target_url, clicks, last_clicked_at, created_at"


def _to_text(value: datetime) -> str:
    """Store timestamps as fixed-width UTC ISO strings so they sort correctly."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SQLiteLinkStore(LinkStore):
    """SQLite store; one short-lived connection per operation."""

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS links (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        code TEXT NOT NULL UNIQUE,
        target_url TEXT NOT NULL,
        clicks INTEGER NOT NULL DEFAULT 0 CHECK (clicks >= 0),
        last_clicked_at TEXT,
        created_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS links_created_at_idx ON links (created_at DESC, id DESC);
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        busy_timeout_seconds: float = 30.0,
        create_tables: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite store.

        Args:
            db_path: Database file path
            busy_timeout_seconds: How long a writer waits for the file lock
            create_tables: Create the links table on initialize
            logger: Optional logger instance
        """
        super().__init__(f"sqlite:///{db_path}")
        self.db_path = Path(db_path)
        self.busy_timeout_seconds = busy_timeout_seconds
        self.create_tables = create_tables
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_url(cls, store_url: str, **kwargs) -> "SQLiteLinkStore":
        """Build from sqlite:///relative.db or sqlite:////absolute.db."""
        parsed = urlparse(store_url)
        path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
        if not path:
            raise ValueError(f"SQLite store URL has no database path: {store_url}")
        return cls(db_path=path, **kwargs)

    @asynccontextmanager
    async def _get_connection(self, operation: str):
        """Open a connection, mapping driver errors to StoreUnavailable."""
        try:
            async with aiosqlite.connect(self.db_path, timeout=self.busy_timeout_seconds) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except (aiosqlite.Error, OSError) as e:
            self.logger.error(f"Store error during {operation}: {e}")
            raise StoreUnavailable() from e

    async def _write_returning(self, operation: str, sql: str, params: Union[tuple, dict]) -> Optional[LinkRecord]:
        """Run one write statement with RETURNING and commit it."""
        async with self._get_connection(operation) as db:
            cursor = await db.execute(sql, params)
            # Drain the cursor so the statement completes before commit
            rows = await cursor.fetchall()
            await cursor.close()
            await db.commit()
        return LinkRecord.from_row(rows[0]) if rows else None

    async def initialize(self) -> None:
        """Create the database file and, if enabled, the links table."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._get_connection("initialize") as db:
            await db.execute("PRAGMA journal_mode=WAL")
            if self.create_tables:
                await db.executescript(self.CREATE_TABLE_SQL)
            await db.commit()
        self.logger.info(f"SQLite store ready at {self.db_path}")

    async def insert_if_absent(
        self,
        code: str,
        target_url: str,
        created_at: datetime,
    ) -> Optional[LinkRecord]:
        record = await self._write_returning(
            "insert",
            f"""
            INSERT INTO links (code, target_url, clicks, created_at)
            VALUES (?, ?, 0, ?)
            ON CONFLICT (code) DO NOTHING
            RETURNING {_COLUMNS}
            """,
            (code, target_url, _to_text(created_at)),
        )
        if record is None:
            self.logger.debug(f"Insert conflict for code {code}")
        return record

    async def find_by_code(self, code: str) -> Optional[LinkRecord]:
        async with self._get_connection("find") as db:
            cursor = await db.execute(f"SELECT {_COLUMNS} FROM links WHERE code = ?", (code,))
            row = await cursor.fetchone()
            await cursor.close()
        return LinkRecord.from_row(row) if row else None

    async def code_exists(self, code: str) -> bool:
        async with self._get_connection("exists") as db:
            cursor = await db.execute("SELECT 1 FROM links WHERE code = ?", (code,))
            row = await cursor.fetchone()
            await cursor.close()
        return row is not None

    async def increment_click_atomic(
        self,
        code: str,
        clicked_at: datetime,
    ) -> Optional[LinkRecord]:
        return await self._write_returning(
            "increment",
            f"""
            UPDATE links
            SET clicks = clicks + 1,
                last_clicked_at = MAX(COALESCE(last_clicked_at, :clicked_at), :clicked_at)
            WHERE code = :code
            RETURNING {_COLUMNS}
            """,
            {"clicked_at": _to_text(clicked_at), "code": code},
        )

    async def delete_by_code(self, code: str) -> bool:
        async with self._get_connection("delete") as db:
            cursor = await db.execute("DELETE FROM links WHERE code = ?", (code,))
            deleted = cursor.rowcount
            await cursor.close()
            await db.commit()
        return deleted > 0

    async def list_all(self) -> List[LinkRecord]:
        async with self._get_connection("list") as db:
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM links ORDER BY created_at DESC, id DESC"
            )
            rows = await cursor.fetchall()
            await cursor.close()
        return [LinkRecord.from_row(row) for row in rows]

    async def health_check(self) -> bool:
        try:
            async with self._get_connection("health check") as db:
                await db.execute("SELECT 1")
            return True
        except StoreUnavailable:
            return False

    async def close(self) -> None:
        # Connections are opened per operation; nothing is held open
        self.logger.debug("SQLite store closed")
