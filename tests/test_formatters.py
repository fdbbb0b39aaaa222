"""Tests for log-safe formatting helpers."""

from keyauth.formatters import BODY_LOG_LIMIT, mask_key, truncate


class TestMaskKey:
    def test_empty(self):
        assert mask_key("") == "<empty>"

    def test_short_key_fully_hidden(self):
        assert mask_key("abc123") == "****(6 chars)"

    def test_long_key_prefix_only(self):
        key = "abcd" + "x" * 28
        masked = mask_key(key)
        assert masked.startswith("abcd")
        assert "(32 chars)" in masked
        assert key not in masked


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("hello") == "hello"

    def test_long_text(self):
        text = "a" * (BODY_LOG_LIMIT + 10)
        out = truncate(text)
        assert out.startswith("a" * BODY_LOG_LIMIT)
        assert "truncated" in out
        assert f"{len(text):,} chars" in out

    def test_custom_limit(self):
        assert truncate("abcdef", limit=3).startswith("abc...")
