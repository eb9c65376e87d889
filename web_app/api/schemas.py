"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shortlinks.database.models import LinkRecord


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateLinkRequest(BaseModel):
    """Request to create a short link.

    Both fields are validated by the registry so that every bad value maps to
    the same 400 responses.
    """

    url: Optional[str] = Field(None, description="The target URL")
    code: Optional[str] = Field(None, description="Optional custom code (6-12 letters/digits)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "code": "MYREPO"},
            ]
        }
    }


class LinkResponse(CamelModel):
    """A stored link with its click statistics."""

    code: str
    target_url: str
    clicks: int
    last_clicked_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_record(cls, record: LinkRecord) -> "LinkResponse":
        return cls(
            code=record.code,
            target_url=record.target_url,
            clicks=record.clicks,
            last_clicked_at=record.last_clicked_at,
            created_at=record.created_at,
        )


class CreateLinkResponse(CamelModel):
    """Response after creating a link."""

    code: str = Field(..., description="The stored code")
    short_url: str = Field(..., description="The complete short URL")
    target_url: str = Field(..., description="The target URL")
    clicks: int = Field(0, description="Always 0 for a new link")
    created_at: datetime = Field(..., description="Creation timestamp")


class DeleteResponse(BaseModel):
    """Response after deleting a link."""

    success: bool = True
    message: str = "Link deleted"


class HealthResponse(BaseModel):
    """Health check response."""

    ok: bool = Field(..., description="Overall status")
    version: str = Field(..., description="Service version")
    uptime: float = Field(..., description="Seconds since the app was created")
    timestamp: datetime = Field(..., description="Check timestamp")
    store: str = Field(..., description="Store status")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Machine-stable reason")
    detail: Optional[str] = Field(None, description="Short human-readable message")
