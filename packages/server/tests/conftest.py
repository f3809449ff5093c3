"""
Shared fixtures: a throwaway SQLite database per test, a session factory bound
to it, and an ASGI client whose requests run against that database.
"""

from __future__ import annotations

import os
import tempfile
import uuid

# Settings are read once at import time; point them at test values first.
_TEST_DIR = tempfile.mkdtemp(prefix="roadmap-hub-tests-")
os.environ["RH_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/app.db"
os.environ["RH_JWT_SECRET"] = "test-secret-with-at-least-thirty-two-bytes"
os.environ["RH_AUTH_HOOK_SECRET"] = "test-hook-secret"
os.environ["RH_LOG_FORMAT"] = "console"

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.auth import Principal, create_jwt
from app.core.database import build_engine, build_session_factory, get_session, init_db
from app.main import app
from app.services.organizations import create_organization_and_assign_admin
from roadmap_hub_shared.schemas.organizations import OrgCreateRequest


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    """A single session for service-level tests; rolled back on teardown."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(session_factory):
    async def _get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_principal():
    def _make(name: str | None = None) -> Principal:
        name = name or f"user-{uuid.uuid4().hex[:8]}"
        return Principal(id=uuid.uuid4(), email=f"{name}@example.com")

    return _make


@pytest.fixture
def auth_headers():
    def _headers(principal: Principal) -> dict:
        return {"Authorization": f"Bearer {create_jwt(principal.id, principal.email)}"}

    return _headers


@pytest.fixture
def alice(make_principal):
    return make_principal("alice")


@pytest.fixture
def bob(make_principal):
    return make_principal("bob")


@pytest.fixture
def carol(make_principal):
    return make_principal("carol")


@pytest.fixture
async def org(session, alice):
    """An organization administered by alice."""
    return await create_organization_and_assign_admin(
        OrgCreateRequest(name="Acme"), alice, session
    )
