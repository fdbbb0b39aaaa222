"""Starlette application guarded by the key-auth middleware."""

import logging
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from keyauth.auth import KeyAuthMiddleware
from keyauth.models import KeyAuthConfig, resolve_config

logger = logging.getLogger(__name__)


async def hello(request: Request) -> PlainTextResponse:
    return PlainTextResponse("Hello, World!\n")


def create_app(config: KeyAuthConfig) -> Starlette:
    """Build the app.  Raises ``ConfigurationError`` for a bad *config*."""
    config = resolve_config(config)

    @asynccontextmanager
    async def app_lifespan(app):
        logger.info(f"Key auth enabled: lookup={config.key_lookup!r}, scheme={config.auth_scheme!r}")
        yield

    return Starlette(
        routes=[Route("/", hello, methods=["GET"])],
        middleware=[Middleware(KeyAuthMiddleware, config=config)],
        lifespan=app_lifespan,
    )
