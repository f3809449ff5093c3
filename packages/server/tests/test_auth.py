"""
Tests for authentication.

Covers:
- JWT creation and decoding
- Bearer token extraction into a Principal
- Auth hook shared-secret guard
- Error envelope for unauthenticated requests
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import jwt
import pytest

from app.core.auth import (
    Principal,
    create_jwt,
    decode_jwt,
    get_current_principal,
    principal_from_token,
    verify_auth_hook,
)
from app.core.config import get_settings
from app.core.errors import Unauthenticated


# ---------------------------------------------------------------------------
# Unit Tests: JWT
# ---------------------------------------------------------------------------

class TestJWT:
    def test_create_and_decode(self):
        principal_id = uuid.uuid4()
        token = create_jwt(principal_id, "a@example.com")
        payload = decode_jwt(token)
        assert payload["sub"] == str(principal_id)
        assert payload["email"] == "a@example.com"
        assert payload["aud"] == get_settings().jwt_audience
        assert "jti" in payload

    def test_expired_token_rejected(self):
        token = create_jwt(uuid.uuid4(), "a@example.com", expires_delta=timedelta(seconds=-10))
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_jwt(token)

    def test_wrong_audience_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "email": "a@example.com", "aud": "someone-else"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(jwt.InvalidAudienceError):
            decode_jwt(token)

    def test_tampered_token_rejected(self):
        token = create_jwt(uuid.uuid4(), "a@example.com")
        with pytest.raises(jwt.PyJWTError):
            decode_jwt(token + "x")


class TestPrincipalFromToken:
    def test_email_is_normalized(self):
        principal_id = uuid.uuid4()
        principal = principal_from_token(create_jwt(principal_id, "  Alice@Example.COM "))
        assert principal.id == principal_id
        assert principal.email == "alice@example.com"

    def test_invalid_token(self):
        with pytest.raises(Unauthenticated):
            principal_from_token("not-a-jwt")

    def test_non_uuid_subject(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "robot", "email": "a@example.com", "aud": settings.jwt_audience},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthenticated):
            principal_from_token(token)

    def test_missing_email_claim(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "aud": settings.jwt_audience},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthenticated):
            principal_from_token(token)


class TestCurrentPrincipal:
    @pytest.mark.asyncio
    async def test_bearer_prefix_required(self):
        token = create_jwt(uuid.uuid4(), "a@example.com")
        with pytest.raises(Unauthenticated):
            await get_current_principal(authorization=token)

    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(Unauthenticated):
            await get_current_principal(authorization=None)

    @pytest.mark.asyncio
    async def test_valid_bearer(self):
        principal_id = uuid.uuid4()
        principal = await get_current_principal(
            authorization=f"Bearer {create_jwt(principal_id, 'a@example.com')}"
        )
        assert isinstance(principal, Principal)
        assert principal.id == principal_id


class TestAuthHook:
    @pytest.mark.asyncio
    async def test_correct_secret(self):
        await verify_auth_hook(x_auth_hook_secret=get_settings().auth_hook_secret)

    @pytest.mark.asyncio
    async def test_wrong_secret(self):
        with pytest.raises(Unauthenticated):
            await verify_auth_hook(x_auth_hook_secret="nope")

    @pytest.mark.asyncio
    async def test_missing_secret(self):
        with pytest.raises(Unauthenticated):
            await verify_auth_hook(x_auth_hook_secret=None)


# ---------------------------------------------------------------------------
# Integration: HTTP surface
# ---------------------------------------------------------------------------

class TestUnauthenticatedRequests:
    @pytest.mark.asyncio
    async def test_no_token_is_401_envelope(self, client):
        response = await client.get("/api/v1/orgs")
        assert response.status_code == 401
        body = response.json()
        assert body["error"]["code"] == "UNAUTHENTICATED"
        assert body["error"]["status"] == 401

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get(
            "/api/v1/orgs", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_mutations_require_auth(self, client):
        response = await client.post("/api/v1/orgs", json={"name": "Acme"})
        assert response.status_code == 401
        response = await client.delete(f"/api/v1/members/{uuid.uuid4()}")
        assert response.status_code == 401
