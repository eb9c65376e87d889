"""Data models for the link store."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def _as_utc(value: Any) -> Optional[datetime]:
    """Coerce a stored timestamp (datetime or ISO string) to aware UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class LinkRecord:
    """Represents a short link in the store."""

    code: str
    target_url: str
    created_at: datetime
    clicks: int = 0
    last_clicked_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to the public JSON shape."""
        return {
            "code": self.code,
            "targetUrl": self.target_url,
            "clicks": self.clicks,
            "lastClickedAt": self.last_clicked_at.isoformat() if self.last_clicked_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LinkRecord":
        """Create from a database row with snake_case column names."""
        return cls(
            code=row["code"],
            target_url=row["target_url"],
            created_at=_as_utc(row["created_at"]),
            clicks=row["clicks"] or 0,
            last_clicked_at=_as_utc(row["last_clicked_at"]),
        )
