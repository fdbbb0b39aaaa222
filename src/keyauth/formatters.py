"""Log-safe rendering of credentials and upstream response bodies.

Keys are never logged verbatim: only a short prefix and the length are
kept.  Upstream bodies are cut to ``BODY_LOG_LIMIT`` characters.
"""

# ---------------------------------------------------------------------------
#  Constants
# ---------------------------------------------------------------------------

BODY_LOG_LIMIT = 2_000
KEY_PREFIX_LEN = 4


def mask_key(key: str) -> str:
    """Render a key as ``abcd…(32 chars)`` for log lines."""
    if not key:
        return "<empty>"
    if len(key) <= KEY_PREFIX_LEN * 2:
        return f"****({len(key)} chars)"
    return f"{key[:KEY_PREFIX_LEN]}…({len(key)} chars)"


def truncate(text: str, limit: int = BODY_LOG_LIMIT) -> str:
    """Truncate text that exceeds the character limit, noting the full size."""
    if len(text) <= limit:
        return text
    return text[:limit] + f"... truncated ({len(text):,} chars, limit {limit:,})"
