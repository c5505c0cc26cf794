"""Tests for optional bearer token auth.

Tests verify:
AC-1: Token set + no header → 401
AC-2: Token set + correct header → 200
AC-3: Token set + wrong header → 401 "Invalid token", logged
AC-4: Token unset + no header → 200 (dev mode)
AC-5: Auth applies to every router
"""

import logging
import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def app_with_token():
    """Create a test client with FEEDPUSH_TOKEN set."""
    with patch.dict(os.environ, {"FEEDPUSH_TOKEN": "secret123"}):
        from feedpush.api.main import app

        yield TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def app_no_token():
    """Create a test client with FEEDPUSH_TOKEN unset."""
    env = os.environ.copy()
    env.pop("FEEDPUSH_TOKEN", None)
    with patch.dict(os.environ, env, clear=True):
        from feedpush.api.main import app

        yield TestClient(app, raise_server_exceptions=False)


# ---------------------------------------------------------------------------
# AC-1: Token set + no header → 401
# ---------------------------------------------------------------------------


def test_api_returns_401_without_header_when_token_set(app_with_token):
    resp = app_with_token.get("/api/health")
    assert resp.status_code == 401, f"Expected 401, got {resp.status_code}"
    assert resp.json()["detail"] == "Not authenticated"
    assert resp.headers["www-authenticate"] == "Bearer"


# ---------------------------------------------------------------------------
# AC-2: Token set + correct header → 200
# ---------------------------------------------------------------------------


def test_api_returns_200_with_correct_bearer_when_token_set(app_with_token):
    resp = app_with_token.get(
        "/api/health",
        headers={"Authorization": "Bearer secret123"},
    )
    assert resp.status_code == 200, f"Expected 200, got {resp.status_code}"


# ---------------------------------------------------------------------------
# AC-3: Token set + wrong header → 401
# ---------------------------------------------------------------------------


def test_api_returns_401_with_wrong_bearer_when_token_set(app_with_token):
    resp = app_with_token.get(
        "/api/health",
        headers={"Authorization": "Bearer wrongtoken"},
    )
    assert resp.status_code == 401, f"Expected 401, got {resp.status_code}"
    assert resp.json()["detail"] == "Invalid token"
    assert resp.headers["www-authenticate"] == "Bearer"


def test_wrong_bearer_is_logged(app_with_token, caplog):
    with caplog.at_level(logging.WARNING, logger="feedpush.api.auth"):
        app_with_token.get("/api/health", headers={"Authorization": "Bearer wrongtoken"})

    assert any("invalid bearer token" in r.getMessage() for r in caplog.records)


def test_blank_token_means_open_api():
    from feedpush.config import api_token

    with patch.dict(os.environ, {"FEEDPUSH_TOKEN": "   "}):
        assert api_token() is None


# ---------------------------------------------------------------------------
# AC-4: Token unset + no header → 200 (dev mode)
# ---------------------------------------------------------------------------


def test_api_open_when_token_unset(app_no_token):
    resp = app_no_token.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# AC-5: Every router is protected
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/board/popular/global"),
        ("get", "/api/users/1/push"),
        ("post", "/api/users/1/tokens"),
        ("get", "/api/articles/saved?user_idx=1"),
        ("get", "/api/categories"),
    ],
)
def test_auth_applies_to_all_routers(app_with_token, method, path):
    resp = getattr(app_with_token, method)(path)
    assert resp.status_code == 401, f"{method.upper()} {path} should require auth"
