"""トークン暗号鍵の生成と解決"""

from __future__ import annotations

from typing import Any

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .codec import base64url_decode
from .config import AuthTokenSettings, TokenConfig
from .exceptions import AuthTokenError, AuthTokenErrorCodes

KEY_SIZE = 16  # AES-128


def generate_key() -> bytes:
    """Generate a random 128-bit (16-byte) AES key."""
    return AESGCM.generate_key(bit_length=128)


def resolve_key(config: TokenConfig | None, settings: AuthTokenSettings) -> bytes:
    """呼び出し単位の設定、次にプロセス全体の設定から token_key を取得する。

    Raises:
        AuthTokenError: 鍵が未設定 (MISSING_KEY) または 16 バイトでない (INVALID_KEY) 場合
    """
    key: Any = config.token_key if config is not None and config.token_key is not None else None
    if key is None:
        key = settings.token_key
    if key is None:
        raise AuthTokenError(
            code=AuthTokenErrorCodes.MISSING_KEY,
            message="Missing AuthToken config for token_key",
        )
    key = _coerce_key(key)
    if len(key) != KEY_SIZE:
        raise AuthTokenError(
            code=AuthTokenErrorCodes.INVALID_KEY,
            message=f"token_key must be {KEY_SIZE} bytes, got {len(key)}",
        )
    return key


def _coerce_key(key: Any) -> bytes:
    """bytes はそのまま、文字列は base64url として解釈する。それ以外は INVALID_KEY。"""
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    if isinstance(key, str):
        try:
            return base64url_decode(key.strip().rstrip("="))
        except ValueError as e:
            raise AuthTokenError(
                code=AuthTokenErrorCodes.INVALID_KEY,
                message="token_key string must be base64url encoded",
                cause=e,
            ) from e
    raise AuthTokenError(
        code=AuthTokenErrorCodes.INVALID_KEY,
        message=f"token_key must be bytes, got {type(key).__name__}",
    )
