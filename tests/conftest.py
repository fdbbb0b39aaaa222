"""Shared fixtures for keyauth tests."""

from urllib.parse import urlencode

import pytest
import respx
from starlette.requests import Request
from starlette.testclient import TestClient

from keyauth.client import SessionClient
from keyauth.models import KeyAuthConfig
from keyauth.server import create_app
from keyauth.validators import constant_key_validator

VALID_KEY = "valid-key"
CIAM_DOMAIN = "ciam.example.com"
CIAM_URL = f"https://{CIAM_DOMAIN}"


def _make_request(
    *,
    path: str = "/",
    headers: dict | None = None,
    query: dict | None = None,
    cookies: dict | None = None,
) -> Request:
    """Build a bare Starlette request for extractor tests."""
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": urlencode(query or {}).encode(),
        "headers": raw_headers,
    }
    return Request(scope)


def _make_client(**overrides) -> TestClient:
    """TestClient for the hello app with a ``valid-key`` validator by default."""
    overrides.setdefault("validator", constant_key_validator(VALID_KEY))
    return TestClient(create_app(KeyAuthConfig(**overrides)))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    """Hello app with the default header:Authorization / Bearer lookup."""
    return _make_client()


@pytest.fixture
def session_client():
    return SessionClient(CIAM_DOMAIN, timeout=5.0)


@pytest.fixture
def mock_ciam():
    """respx router for the identity provider.

    Verify answers 200 and session details return a small body unless
    a test overrides the routes.
    """
    with respx.mock(base_url=CIAM_URL, assert_all_called=False) as router:
        router.get("/ui/api/session/verify", name="verify").respond(200, json={"valid": True})
        router.get("/ui/api/session", name="session").respond(200, text='{"user":"alice"}')
        yield router


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable ``load_settings`` reads."""
    for name in (
        "KEYAUTH_HOST",
        "KEYAUTH_PORT",
        "KEYAUTH_LOG_LEVEL",
        "KEYAUTH_LOOKUP",
        "KEYAUTH_AUTH_SCHEME",
        "KEYAUTH_SKIP_PATHS",
        "KEYAUTH_API_KEY",
        "CIAM_DOMAIN",
        "CIAM_TIMEOUT",
        "CIAM_INSECURE_SKIP_VERIFY",
        "CIAM_REQUIRE_VERIFIED",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def make_request():
    return _make_request


@pytest.fixture
def make_client():
    return _make_client
