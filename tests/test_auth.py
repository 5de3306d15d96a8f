"""
Tests for bearer-token resolution.
"""
import pytest
from fastapi import HTTPException
from unittest.mock import MagicMock

from conftest import make_token
from workbridge.auth import get_current_caller, resolve_caller
from workbridge.config import Settings, get_settings
from workbridge.domain import UserRole


class TestResolveCaller:
    """Tests for resolve_caller."""

    def test_worker_role_from_user_metadata(self):
        caller = resolve_caller(make_token("u1", "worker"), get_settings())
        assert caller.user_id == "u1"
        assert caller.role == UserRole.WORKER
        assert not caller.is_employer

    def test_employer_role_from_app_metadata(self):
        caller = resolve_caller(make_token("u2", "EMPLOYER", section="app_metadata"), get_settings())
        assert caller.role == UserRole.EMPLOYER
        assert caller.is_employer

    def test_unknown_role_defaults_to_worker(self):
        caller = resolve_caller(make_token("u3", "ADMIN"), get_settings())
        assert caller.role == UserRole.WORKER

    def test_wrong_secret(self):
        settings = Settings(identity_jwt_secret="another-secret")
        assert resolve_caller(make_token("u1"), settings) is None

    def test_wrong_audience(self):
        token = make_token("u1", aud="someone-else")
        assert resolve_caller(token, get_settings()) is None

    def test_missing_subject(self):
        token = make_token("", "WORKER")
        assert resolve_caller(token, get_settings()) is None

    def test_garbage_token(self):
        assert resolve_caller("not-a-jwt", get_settings()) is None


class TestGetCurrentCaller:
    """Tests for the FastAPI dependency."""

    def _request(self, header=None):
        request = MagicMock()
        request.headers = {"Authorization": header} if header else {}
        return request

    @pytest.mark.asyncio
    async def test_valid_bearer(self):
        request = self._request(f"Bearer {make_token('u1', 'EMPLOYER')}")
        caller = await get_current_caller(request, get_settings())
        assert caller.user_id == "u1"
        assert caller.is_employer

    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(HTTPException) as exc:
            await get_current_caller(self._request(), get_settings())
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self):
        with pytest.raises(HTTPException) as exc:
            await get_current_caller(self._request("Basic dXNlcjpwYXNz"), get_settings())
        assert exc.value.status_code == 401
