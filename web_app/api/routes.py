"""Link management API routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from shortlinks.common.headers import build_base_url, resolve_path_prefix
from shortlinks.common.url_builder import build_short_url
from shortlinks.errors import InvalidInput

from .schemas import (
    CreateLinkRequest,
    CreateLinkResponse,
    DeleteResponse,
    ErrorResponse,
    LinkResponse,
)

router = APIRouter()


@router.get(
    "/links",
    response_model=List[LinkResponse],
    responses={500: {"model": ErrorResponse, "description": "Store failure"}},
    summary="List links",
    description="All links with click statistics, newest first.",
)
async def list_links(request: Request):
    """List all links."""
    registry = request.app.state.registry

    records = await registry.list_links()

    return [LinkResponse.from_record(record) for record in records]


@router.post(
    "/links",
    response_model=CreateLinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or custom code"},
        409: {"model": ErrorResponse, "description": "Custom code already taken"},
        500: {"model": ErrorResponse, "description": "Code generation exhausted or store failure"},
    },
    summary="Create link",
    description="Create a short link. Optionally provide a custom code.",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a short link."""
    registry = request.app.state.registry
    config = request.app.state.config

    record = await registry.create(body.url, code=body.code)

    headers = dict(request.headers)
    short_url = build_short_url(
        code=record.code,
        base_url=build_base_url(headers, fallback_base_url=config.base_url),
        path_prefix=resolve_path_prefix(headers, config.path_prefix),
    )

    return CreateLinkResponse(
        code=record.code,
        short_url=short_url,
        target_url=record.target_url,
        clicks=record.clicks,
        created_at=record.created_at,
    )


@router.get(
    "/links/{code}",
    response_model=LinkResponse,
    responses={404: {"model": ErrorResponse, "description": "Code not found"}},
    summary="Get link statistics",
    description="Get one link and its click statistics without counting a click.",
)
async def get_link(request: Request, code: str):
    """Get one link."""
    registry = request.app.state.registry

    record = await registry.lookup(code)

    return LinkResponse.from_record(record)


@router.delete(
    "/links",
    response_model=DeleteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Code missing"},
        404: {"model": ErrorResponse, "description": "Code not found"},
    },
    summary="Delete link",
)
async def delete_link(request: Request, code: Optional[str] = Query(None)):
    """Delete a link by its code."""
    registry = request.app.state.registry

    if not code or not code.strip():
        raise InvalidInput("Code is required")

    await registry.delete(code)

    return DeleteResponse()
