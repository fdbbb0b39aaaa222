"""Ready-made key validators.

A validator is any callable ``(key, request) -> bool`` (or returning an
awaitable of bool).  Two are provided:

  - ``constant_key_validator`` - compare against one fixed key.
  - ``RemoteSessionValidator`` - ask the identity provider via ``SessionClient``.
"""

import logging
import secrets

from starlette.requests import Request

from keyauth.client import SessionClient
from keyauth.formatters import mask_key
from keyauth.models import Validator

logger = logging.getLogger(__name__)


def constant_key_validator(expected: str) -> Validator:
    """Accept exactly *expected* (constant-time comparison)."""
    if not expected:
        raise ValueError("constant_key_validator requires a non-empty key.")
    expected_bytes = expected.encode()

    def validate(key: str, request: Request) -> bool:
        return secrets.compare_digest(key.encode(), expected_bytes)

    return validate


class RemoteSessionValidator:
    """Validate keys as session tokens of a remote identity provider.

    By default a key is accepted whenever the verification round-trip
    completes without a transport error, whatever the status code.  Pass
    ``require_verified=True`` to also demand a 200 from the verify endpoint.
    """

    def __init__(self, client: SessionClient, *, require_verified: bool = False) -> None:
        self.client = client
        self.require_verified = require_verified

    async def __call__(self, key: str, request: Request) -> bool:
        check = await self.client.verify_session(key)
        accepted = check.ok
        if self.require_verified:
            accepted = accepted and check.status_code == 200
        logger.debug(
            f"Key {mask_key(key)} {'accepted' if accepted else 'rejected'} "
            f"(status={check.status_code}, transport_ok={check.ok})"
        )
        return accepted
