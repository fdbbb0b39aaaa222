"""Process settings: load from environment variables and build the auth config.

Environment variables:

  Server:
    KEYAUTH_HOST        - Bind address (default: 0.0.0.0)
    KEYAUTH_PORT        - Bind port (default: 1323)
    KEYAUTH_LOG_LEVEL   - Root log level (default: info)

  Middleware:
    KEYAUTH_LOOKUP      - "<source>:<name>" key lookup.  Defaults to
                          "cookie:token" with the remote validator and to
                          "header:Authorization" otherwise.
    KEYAUTH_AUTH_SCHEME - Authorization scheme (default: Bearer)
    KEYAUTH_SKIP_PATHS  - Comma-separated paths served without a key

  Validator (first one set wins):
    CIAM_DOMAIN                - Identity-provider domain; keys are checked
                                 against https://<domain>/ui/api/session/verify
    CIAM_TIMEOUT               - Outbound timeout in seconds (default: 10)
    CIAM_INSECURE_SKIP_VERIFY  - Skip TLS certificate checks (default: false)
    CIAM_REQUIRE_VERIFIED      - Also require a 200 from verify (default: false)
    KEYAUTH_API_KEY            - Single fixed key, compared locally
"""

import os

from pydantic import BaseModel, ConfigDict, Field

from keyauth.auth import skip_paths
from keyauth.client import DEFAULT_TIMEOUT, SessionClient
from keyauth.models import KeyAuthConfig, Validator
from keyauth.validators import RemoteSessionValidator, constant_key_validator

SESSION_KEY_LOOKUP = "cookie:token"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class Settings(BaseModel):
    """Values read from the environment by ``load_settings``."""

    model_config = ConfigDict(extra="forbid", frozen=True)
    host: str = "0.0.0.0"
    port: int = Field(1323, ge=0, le=65535)
    log_level: str = "info"
    key_lookup: str = ""
    auth_scheme: str = ""
    skip_paths: tuple[str, ...] = ()
    api_key: str = ""
    ciam_domain: str = ""
    ciam_timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    ciam_insecure_skip_verify: bool = False
    ciam_require_verified: bool = False


def parse_bool(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable."""
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"Invalid {name} value {raw!r}: expected true/false.")


def _parse_number(name: str, default: str, kind: type):
    raw = os.environ.get(name, "").strip() or default
    try:
        return kind(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {name} value {raw!r}: {exc}") from exc


def load_settings() -> Settings:
    """Build ``Settings`` from environment variables."""
    skip = os.environ.get("KEYAUTH_SKIP_PATHS", "")
    return Settings(
        host=os.environ.get("KEYAUTH_HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=_parse_number("KEYAUTH_PORT", "1323", int),
        log_level=os.environ.get("KEYAUTH_LOG_LEVEL", "info").strip().lower() or "info",
        key_lookup=os.environ.get("KEYAUTH_LOOKUP", "").strip(),
        auth_scheme=os.environ.get("KEYAUTH_AUTH_SCHEME", "").strip(),
        skip_paths=tuple(p.strip() for p in skip.split(",") if p.strip()),
        api_key=os.environ.get("KEYAUTH_API_KEY", "").strip(),
        ciam_domain=os.environ.get("CIAM_DOMAIN", "").strip(),
        ciam_timeout=_parse_number("CIAM_TIMEOUT", str(DEFAULT_TIMEOUT), float),
        ciam_insecure_skip_verify=parse_bool("CIAM_INSECURE_SKIP_VERIFY"),
        ciam_require_verified=parse_bool("CIAM_REQUIRE_VERIFIED"),
    )


def build_validator(settings: Settings) -> Validator | None:
    """Pick the validator the settings describe, or None if there is none."""
    if settings.ciam_domain:
        client = SessionClient(
            settings.ciam_domain,
            timeout=settings.ciam_timeout,
            verify=not settings.ciam_insecure_skip_verify,
        )
        return RemoteSessionValidator(client, require_verified=settings.ciam_require_verified)
    if settings.api_key:
        return constant_key_validator(settings.api_key)
    return None


def build_config(settings: Settings) -> KeyAuthConfig:
    """Unresolved middleware config for *settings*.

    The validator may be missing; ``resolve_config`` reports that.
    """
    key_lookup = settings.key_lookup
    if not key_lookup and settings.ciam_domain:
        key_lookup = SESSION_KEY_LOOKUP
    return KeyAuthConfig(
        skipper=skip_paths(*settings.skip_paths) if settings.skip_paths else None,
        key_lookup=key_lookup,
        auth_scheme=settings.auth_scheme,
        validator=build_validator(settings),
    )
