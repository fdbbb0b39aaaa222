"""Credential lookups: where in the request the key lives and how to read it.

A lookup specifier has the form ``"<source>:<name>"``:

  - ``header:<name>``  - request header.  For ``Authorization`` the value
    must be ``<scheme> <key>`` and the scheme prefix is stripped.
  - ``query:<name>``   - query-string parameter, verbatim.
  - ``cookie:<name>``  - cookie value.

The specifier is parsed once, at configuration time, into one of the
lookup models below.  Each model's ``extract()`` raises an
``ExtractionError`` subclass when the key cannot be read.
"""

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request

logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"
DEFAULT_AUTH_SCHEME = "Bearer"
DEFAULT_KEY_LOOKUP = f"header:{AUTHORIZATION}"


# ---------------------------------------------------------------------------
#  Errors
# ---------------------------------------------------------------------------


class ExtractionError(Exception):
    """The request carries no usable key."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MissingKeyError(ExtractionError):
    """Header, parameter or cookie is absent (or empty)."""


class InvalidKeyFormatError(ExtractionError):
    """Authorization header present but not prefixed by the auth scheme."""


# ---------------------------------------------------------------------------
#  Lookup variants
# ---------------------------------------------------------------------------


class HeaderLookup(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    source: Literal["header"] = "header"
    name: str = Field(AUTHORIZATION, min_length=1)
    scheme: str = DEFAULT_AUTH_SCHEME

    @property
    def checks_scheme(self) -> bool:
        return self.name.lower() == AUTHORIZATION.lower()

    def extract(self, request: Request) -> str:
        value = request.headers.get(self.name, "")
        if not value:
            raise MissingKeyError("Missing key in request header")
        if not self.checks_scheme:
            return value
        n = len(self.scheme)
        # "<scheme> <key>" with a non-empty key
        if len(value) > n + 1 and value[:n] == self.scheme and value[n] == " ":
            return value[n + 1:]
        raise InvalidKeyFormatError("Invalid key in the request header")


class QueryLookup(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    source: Literal["query"] = "query"
    name: str = Field(..., min_length=1)

    def extract(self, request: Request) -> str:
        value = request.query_params.get(self.name, "")
        if not value:
            raise MissingKeyError("Missing key in the query string")
        return value


class CookieLookup(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    source: Literal["cookie"] = "cookie"
    name: str = Field(..., min_length=1)

    def extract(self, request: Request) -> str:
        value = request.cookies.get(self.name, "")
        if not value:
            raise MissingKeyError(f"Missing key in cookie '{self.name}'")
        return value


Lookup = HeaderLookup | QueryLookup | CookieLookup


def parse_lookup(key_lookup: str, auth_scheme: str = DEFAULT_AUTH_SCHEME) -> Lookup:
    """Turn a ``"<source>:<name>"`` specifier into a lookup model.

    A specifier without a name (no ``:`` or nothing after it) falls back to
    ``header:Authorization``.  An unknown source reads the named header.
    """
    source, sep, name = key_lookup.partition(":")
    source = source.strip().lower()
    name = name.strip()

    if not sep or not name:
        logger.warning(
            f"Malformed key lookup {key_lookup!r}; using {DEFAULT_KEY_LOOKUP!r}"
        )
        return HeaderLookup(scheme=auth_scheme)

    if source == "query":
        return QueryLookup(name=name)
    if source == "cookie":
        return CookieLookup(name=name)
    if source != "header":
        logger.warning(f"Unknown key lookup source {source!r}; reading header {name!r}")
    return HeaderLookup(name=name, scheme=auth_scheme)
