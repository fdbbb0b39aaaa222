"""Key-auth middleware: extract a key from each request and validate it."""

import inspect
import logging

from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from keyauth.extractors import ExtractionError, HeaderLookup
from keyauth.formatters import mask_key
from keyauth.models import KeyAuthConfig, Skipper, Validator, resolve_config

logger = logging.getLogger(__name__)


class KeyAuthMiddleware(BaseHTTPMiddleware):
    """Authenticate every request with a key checked by ``config.validator``.

    For a skipped request the next handler runs untouched.  A missing or
    malformed key gets a 400 carrying the reason; a key the validator
    rejects gets a 401.  A valid key passes the request on and the
    downstream response is returned as is.
    """

    def __init__(self, app, config: KeyAuthConfig) -> None:
        super().__init__(app)
        self.config = resolve_config(config)

    async def dispatch(self, request: Request, call_next):
        config = self.config
        if config.skipper(request):
            return await call_next(request)

        try:
            key = config.lookup.extract(request)
        except ExtractionError as e:
            logger.debug(f"{request.method} {request.url.path}: {e.reason}")
            return JSONResponse({"message": e.reason}, status_code=400)

        valid = config.validator(key, request)
        if inspect.isawaitable(valid):
            valid = await valid
        if valid:
            return await call_next(request)

        logger.debug(f"{request.method} {request.url.path}: rejected key {mask_key(key)}")
        return self._unauthorized()

    def _unauthorized(self) -> JSONResponse:
        headers = {}
        lookup = self.config.lookup
        if isinstance(lookup, HeaderLookup) and lookup.checks_scheme:
            headers["WWW-Authenticate"] = lookup.scheme
        return JSONResponse({"message": "Unauthorized"}, status_code=401, headers=headers)


def key_auth(validator: Validator, **overrides) -> Middleware:
    """``Middleware`` entry running ``KeyAuthMiddleware`` with the defaults.

    Usage: ``Starlette(routes=..., middleware=[key_auth(check_key)])``.
    Extra keyword arguments override ``KeyAuthConfig`` fields.  The config
    is resolved here, so a bad configuration fails immediately.
    """
    config = resolve_config(KeyAuthConfig(validator=validator, **overrides))
    return Middleware(KeyAuthMiddleware, config=config)


def skip_paths(*paths: str) -> Skipper:
    """Skipper that bypasses authentication for the given request paths."""
    skipped = frozenset(paths)

    def skipper(request: Request) -> bool:
        return request.url.path in skipped

    return skipper
