"""Tests for HTTP endpoints."""

import asyncio

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shortlinks.errors import StoreUnavailable
from shortlinks.redirect import RedirectHandler
from shortlinks.registry import LinkRegistry
from shortlinks.shortcode import ShortCodeGenerator
from web_app import create_app


@pytest.mark.asyncio
class TestCreateLink:
    """Test POST /links."""

    async def test_create_generated(self, client, sample_urls):
        response = await client.post("/links", json={"url": sample_urls[0]})

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"code", "shortUrl", "targetUrl", "clicks", "createdAt"}
        assert ShortCodeGenerator().is_valid_format(data["code"])
        assert data["shortUrl"] == f"http://sho.rt/{data['code']}"
        assert data["targetUrl"] == sample_urls[0]
        assert data["clicks"] == 0

    async def test_create_custom_code(self, client, sample_urls):
        response = await client.post("/links", json={"url": sample_urls[0], "code": "promo1"})

        assert response.status_code == 201
        assert response.json()["code"] == "PROMO1"

    async def test_short_url_behind_proxy(self, client, sample_urls):
        response = await client.post(
            "/links",
            json={"url": sample_urls[0], "code": "PROXY1"},
            headers={
                "X-Forwarded-Proto": "https",
                "X-Forwarded-Host": "go.example.org",
                "X-Forwarded-Prefix": "/s",
            },
        )

        assert response.json()["shortUrl"] == "https://go.example.org/s/PROXY1"

    @pytest.mark.parametrize("body", [
        {"url": "not-a-url"},
        {"url": "ftp://example.com"},
        {"url": ""},
        {},
    ])
    async def test_invalid_url(self, client, body):
        response = await client.post("/links", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_url"

    async def test_malformed_body(self, client):
        response = await client.post("/links", json={"url": ["https://example.com"]})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    async def test_invalid_custom_code(self, client, sample_urls):
        response = await client.post("/links", json={"url": sample_urls[0], "code": "ab-12"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_code_format"

    async def test_duplicate_custom_code(self, client, sample_urls):
        await client.post("/links", json={"url": sample_urls[0], "code": "PROMO1"})

        response = await client.post("/links", json={"url": sample_urls[1], "code": "promo1"})

        assert response.status_code == 409
        assert response.json() == {"error": "code_taken", "detail": "This code is already taken"}


@pytest.mark.asyncio
class TestListAndGetLinks:
    """Test GET /links and GET /links/{code}."""

    async def test_list_newest_first(self, client, sample_urls):
        codes = []
        for url in sample_urls:
            response = await client.post("/links", json={"url": url})
            codes.append(response.json()["code"])

        response = await client.get("/links")

        assert response.status_code == 200
        data = response.json()
        assert [item["code"] for item in data] == list(reversed(codes))
        assert set(data[0]) == {"code", "targetUrl", "clicks", "lastClickedAt", "createdAt"}
        assert data[0]["lastClickedAt"] is None

    async def test_list_empty(self, client):
        response = await client.get("/links")

        assert response.status_code == 200
        assert response.json() == []

    async def test_get_link(self, client, sample_urls):
        await client.post("/links", json={"url": sample_urls[0], "code": "STATS1"})

        response = await client.get("/links/stats1")

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == "STATS1"
        assert data["targetUrl"] == sample_urls[0]
        assert data["clicks"] == 0

    async def test_get_link_not_found(self, client):
        response = await client.get("/links/NOPE234")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
class TestRedirect:
    """Test GET /{code}."""

    async def test_redirect_counts_clicks(self, client):
        create_response = await client.post("/links", json={"url": "https://example.com/a/b"})
        code = create_response.json()["code"]

        response = await client.get(f"/{code}")
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/a/b"

        response = await client.get(f"/{code.lower()}")
        assert response.status_code == 302

        stats = (await client.get(f"/links/{code}")).json()
        assert stats["clicks"] == 2
        assert stats["lastClickedAt"] is not None

    async def test_not_found(self, client):
        response = await client.get("/NOPE234")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_malformed_code(self, client):
        response = await client.get("/ab")

        assert response.status_code == 404
        assert response.json()["error"] == "invalid_code"

    async def test_permanent_redirect_configured(self, store, registry, redirect_handler, config):
        config.redirect_status_code = 301
        app = create_app(store=store, registry=registry, redirect_handler=redirect_handler, config=config)
        await registry.create("https://example.com/moved", code="MOVED1")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/MOVED1")

        assert response.status_code == 301
        assert response.headers["location"] == "https://example.com/moved"


@pytest.mark.asyncio
class TestDeleteLink:
    """Test DELETE /links."""

    async def test_delete(self, client, sample_urls):
        await client.post("/links", json={"url": sample_urls[0], "code": "GONE12"})

        response = await client.delete("/links", params={"code": "GONE12"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Link deleted"}

        assert (await client.get("/GONE12")).status_code == 404

        response = await client.delete("/links", params={"code": "GONE12"})
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_delete_missing_code(self, client):
        response = await client.delete("/links")
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

        response = await client.delete("/links", params={"code": " "})
        assert response.status_code == 400


@pytest.mark.asyncio
class TestHealth:
    """Test GET /healthz."""

    async def test_healthy(self, client):
        response = await client.get("/healthz")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        data = response.json()
        assert data["ok"] is True
        assert data["store"] == "healthy"
        assert data["version"]
        assert data["uptime"] >= 0

    async def test_unhealthy(self, mock_store, config):
        mock_store.health_check.return_value = False
        app = create_app(
            store=mock_store,
            registry=LinkRegistry(store=mock_store),
            redirect_handler=RedirectHandler(store=mock_store),
            config=config,
        )

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/healthz")

        assert response.status_code == 503
        assert response.json()["ok"] is False

    async def test_hanging_store_reported_unhealthy(self, mock_store, config):
        async def hang():
            await asyncio.sleep(10)
            return True

        mock_store.health_check.side_effect = hang
        config.store_timeout_seconds = 0.01
        app = create_app(
            store=mock_store,
            registry=LinkRegistry(store=mock_store),
            redirect_handler=RedirectHandler(store=mock_store),
            config=config,
        )

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/healthz")

        assert response.status_code == 503
        assert response.json()["store"] == "unhealthy"


@pytest_asyncio.fixture
async def failing_client(mock_store, config):
    """Client for an app whose store is down."""
    mock_store.increment_click_atomic.side_effect = StoreUnavailable()
    mock_store.list_all.side_effect = StoreUnavailable()
    mock_store.code_exists.side_effect = StoreUnavailable()
    app = create_app(
        store=mock_store,
        registry=LinkRegistry(store=mock_store),
        redirect_handler=RedirectHandler(store=mock_store),
        config=config,
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.mark.asyncio
class TestStoreFailures:
    """Store failures map to 500 without internal details."""

    async def test_redirect(self, failing_client):
        response = await failing_client.get("/ABC2345")

        assert response.status_code == 500
        assert response.json() == {"error": "store_unavailable", "detail": "Link store unavailable"}

    async def test_list(self, failing_client):
        response = await failing_client.get("/links")
        assert response.status_code == 500

    async def test_create(self, failing_client):
        response = await failing_client.post("/links", json={"url": "https://example.com"})
        assert response.status_code == 500
        assert response.json()["error"] == "store_unavailable"

    async def test_exhausted_attempts(self, mock_store, config):
        mock_store.code_exists.return_value = True
        app = create_app(
            store=mock_store,
            registry=LinkRegistry(store=mock_store, max_generation_attempts=2),
            redirect_handler=RedirectHandler(store=mock_store),
            config=config,
        )

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.post("/links", json={"url": "https://example.com"})

        assert response.status_code == 500
        assert response.json()["error"] == "exhausted_attempts"
