"""
Health check endpoint tests.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from app.main import app


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Health endpoint should return status ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_ready_check(client: AsyncClient):
    """Ready endpoint should reach the database and return status ready."""
    response = await client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


@pytest.mark.asyncio
async def test_api_root(client: AsyncClient):
    """API v1 root should return version and endpoint list."""
    response = await client.get("/api/v1/")
    assert response.status_code == 200
    data = response.json()
    assert data["api"] == "v1"
    assert "/orgs" in data["endpoints"]


@pytest.mark.asyncio
async def test_security_headers_on_every_response(client: AsyncClient):
    response = await client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "frame-ancestors 'none'" in response.headers["Content-Security-Policy"]


@pytest.mark.asyncio
async def test_openapi_documents_error_envelope(client: AsyncClient):
    """Failure responses are documented with the error envelope schema."""
    schema = (await client.get("/openapi.json")).json()
    responses = schema["paths"]["/api/v1/members/{membershipId}"]["delete"]["responses"]
    for status in ("403", "404", "409"):
        ref = responses[status]["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")
    assert "ErrorResponse" in schema["components"]["schemas"]


def test_run_serves_on_configured_host_and_port(monkeypatch):
    import app.main as main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    main.run()

    (args, kwargs), = calls
    assert args == ("app.main:app",)
    assert kwargs["host"] == main.settings.host
    assert kwargs["port"] == main.settings.port
