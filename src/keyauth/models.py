"""Pydantic configuration model for the key-auth middleware."""

from collections.abc import Awaitable, Callable

from pydantic import BaseModel, ConfigDict
from starlette.requests import Request

from keyauth.extractors import (
    DEFAULT_AUTH_SCHEME,
    DEFAULT_KEY_LOOKUP,
    Lookup,
    parse_lookup,
)

Skipper = Callable[[Request], bool]
Validator = Callable[[str, Request], bool | Awaitable[bool]]


class ConfigurationError(ValueError):
    """The middleware cannot be built from the given configuration."""


def never_skip(request: Request) -> bool:
    return False


class KeyAuthConfig(BaseModel):
    """Key-auth settings.  Empty fields are filled by ``resolve_config``.

    Fields:
        skipper: ``request -> bool``; ``True`` bypasses authentication.
        key_lookup: ``"<source>:<name>"`` (default ``header:Authorization``).
        auth_scheme: scheme expected in the Authorization header (default ``Bearer``).
        validator: ``(key, request) -> bool`` or an awaitable of it.  Required.
        lookup: parsed form of ``key_lookup``; set by ``resolve_config``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
    skipper: Skipper | None = None
    key_lookup: str = ""
    auth_scheme: str = ""
    validator: Validator | None = None
    lookup: Lookup | None = None

    @property
    def resolved(self) -> bool:
        return (
            self.skipper is not None
            and self.validator is not None
            and self.lookup is not None
            and bool(self.key_lookup)
            and bool(self.auth_scheme)
        )


def resolve_config(config: KeyAuthConfig) -> KeyAuthConfig:
    """Return a copy of *config* with defaults filled and the lookup parsed.

    Calling it on an already-resolved config returns the config unchanged.

    Raises:
        ConfigurationError: no validator was supplied.
    """
    if config.validator is None:
        raise ConfigurationError("key-auth middleware requires a validator function")
    if config.resolved:
        return config

    auth_scheme = config.auth_scheme or DEFAULT_AUTH_SCHEME
    key_lookup = config.key_lookup or DEFAULT_KEY_LOOKUP
    return config.model_copy(
        update={
            "skipper": config.skipper or never_skip,
            "auth_scheme": auth_scheme,
            "key_lookup": key_lookup,
            "lookup": config.lookup or parse_lookup(key_lookup, auth_scheme),
        }
    )
