"""keyauth: pluggable key-based authentication middleware for Starlette apps."""

from importlib.metadata import version, PackageNotFoundError

from keyauth.auth import KeyAuthMiddleware, key_auth, skip_paths
from keyauth.extractors import ExtractionError, InvalidKeyFormatError, MissingKeyError
from keyauth.models import ConfigurationError, KeyAuthConfig, resolve_config

try:
    __version__ = version("keyauth")
except PackageNotFoundError:
    __version__ = "0.1.0"  # source checkout without installed metadata

__all__ = [
    "ConfigurationError",
    "ExtractionError",
    "InvalidKeyFormatError",
    "KeyAuthConfig",
    "KeyAuthMiddleware",
    "MissingKeyError",
    "key_auth",
    "resolve_config",
    "skip_paths",
]
