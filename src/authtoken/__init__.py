"""Simplified encrypted authentication tokens (JWE, dir + A128GCM)."""

from .client import (
    AuthToken,
    classify,
    decrypt_token,
    generate_token,
    is_timed_out,
    needs_refresh,
    refresh_token,
)
from .clock import Clock, FixedClock, SystemClock
from .codec import DEFAULT_HEADER, TokenCodec
from .config import AuthTokenSettings, TokenConfig, configure, get_settings, load, reset_settings
from .exceptions import AuthTokenError, AuthTokenErrorCodes
from .keys import generate_key, resolve_key
from .lifecycle import LifecycleEvaluator
from .logger import configure_logging
from .models import TokenPayload, TokenResult, TokenState
from .request import extract_bearer_token

__all__ = [
    "AuthToken",
    "AuthTokenSettings",
    "TokenConfig",
    "TokenPayload",
    "TokenResult",
    "TokenState",
    "TokenCodec",
    "DEFAULT_HEADER",
    "LifecycleEvaluator",
    "Clock",
    "SystemClock",
    "FixedClock",
    "generate_key",
    "generate_token",
    "decrypt_token",
    "refresh_token",
    "is_timed_out",
    "needs_refresh",
    "classify",
    "resolve_key",
    "extract_bearer_token",
    "configure",
    "get_settings",
    "reset_settings",
    "load",
    "configure_logging",
    "AuthTokenError",
    "AuthTokenErrorCodes",
]
