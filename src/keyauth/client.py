"""HTTP client for the remote session-verification service."""

import logging
from dataclasses import dataclass

import httpx

from keyauth.formatters import mask_key, truncate

logger = logging.getLogger(__name__)

VERIFY_PATH = "/ui/api/session/verify"
SESSION_PATH = "/ui/api/session"
SESSION_COOKIE = "token"
DEFAULT_TIMEOUT = 10.0


def cookie_value(value: str) -> str:
    """Drop characters a cookie value cannot carry.

    Only printable ASCII other than ``"``, ``;`` and ``\\`` survives.  A
    result with a comma or edge spaces is sent double-quoted.
    """
    cleaned = "".join(
        ch for ch in value if " " <= ch <= "~" and ch not in '";\\'
    )
    if cleaned.startswith(" ") or cleaned.endswith(" ") or "," in cleaned:
        return f'"{cleaned}"'
    return cleaned


@dataclass(frozen=True)
class SessionCheck:
    """Outcome of one ``verify_session`` call.

    ``ok`` is False only when a request failed at the transport level
    (connection, TLS, timeout).  ``status_code`` is that of the verify call.
    """

    ok: bool
    status_code: int | None = None
    details: str | None = None


class SessionClient:
    """HTTP client for one identity-provider domain."""

    def __init__(
        self,
        domain: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        verify: bool = True,
        scheme: str = "https",
    ) -> None:
        if not domain:
            raise ValueError("SessionClient requires an identity-provider domain.")
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}.")
        self.domain = domain.strip().rstrip("/")
        self.url = f"{scheme}://{self.domain}"
        self.timeout = timeout
        self.verify = verify
        if not verify:
            logger.warning(
                f"TLS certificate verification is DISABLED for {self.url}; "
                "only use this against a trusted identity provider."
            )

    def _headers(self, token: str) -> dict[str, str]:
        return {"Cookie": f"{SESSION_COOKIE}={cookie_value(token)}"}

    async def verify_session(self, token: str) -> SessionCheck:
        """Ask the identity provider whether *token* names a live session.

        On a 200 from the verify endpoint the session details are fetched
        with the same cookie and logged.  Any transport error yields
        ``SessionCheck(ok=False)``.
        """
        logger.debug(f"Verifying session key {mask_key(token)} against {self.url}")
        headers = self._headers(token)
        async with httpx.AsyncClient(timeout=self.timeout, verify=self.verify) as client:
            try:
                resp = await client.get(f"{self.url}{VERIFY_PATH}", headers=headers)
            except httpx.HTTPError as e:
                logger.warning(self.handle_error(e))
                return SessionCheck(ok=False)

            if resp.status_code != 200:
                logger.debug(f"Session verify answered {resp.status_code}")
                return SessionCheck(ok=True, status_code=resp.status_code)

            try:
                details = await client.get(f"{self.url}{SESSION_PATH}", headers=headers)
            except httpx.HTTPError as e:
                logger.warning(self.handle_error(e))
                return SessionCheck(ok=False, status_code=resp.status_code)

        logger.debug(f"Session details: {truncate(details.text)}")
        return SessionCheck(ok=True, status_code=resp.status_code, details=details.text)

    def handle_error(self, e: Exception) -> str:
        """Consistent error formatting referencing this identity provider."""
        if isinstance(e, httpx.HTTPStatusError):
            status = e.response.status_code
            return f"Session service error {status}: {truncate(e.response.text)}"
        if isinstance(e, httpx.ConnectError):
            return f"Cannot connect to session service at {self.url}: {e}"
        if isinstance(e, httpx.TimeoutException):
            return f"Session service at {self.url} timed out after {self.timeout}s."
        return f"Session service error: {type(e).__name__}: {e}"
