"""鍵の生成・解決のユニットテスト"""

from __future__ import annotations

import pytest
from authtoken.codec import base64url_encode
from authtoken.config import AuthTokenSettings, TokenConfig
from authtoken.exceptions import AuthTokenError, AuthTokenErrorCodes
from authtoken.keys import generate_key, resolve_key

KEY_A = b"A" * 16
KEY_B = b"B" * 16


def test_generate_key_length() -> None:
    key = generate_key()
    assert isinstance(key, bytes)
    assert len(key) == 16


def test_generate_key_unique() -> None:
    assert generate_key() != generate_key()


def test_resolve_key_prefers_call_config() -> None:
    """呼び出し単位の設定がプロセス全体の設定より優先されること。"""
    settings = AuthTokenSettings(token_key=KEY_A)
    assert resolve_key(TokenConfig(token_key=KEY_B), settings) == KEY_B


def test_resolve_key_falls_back_to_settings() -> None:
    settings = AuthTokenSettings(token_key=KEY_A)
    assert resolve_key(None, settings) == KEY_A
    assert resolve_key(TokenConfig(timeout=10), settings) == KEY_A


def test_resolve_key_missing_raises() -> None:
    """どこにも鍵がない場合は MISSING_KEY で token_key を示すこと。"""
    with pytest.raises(AuthTokenError) as exc_info:
        resolve_key(None, AuthTokenSettings())
    assert exc_info.value.code == AuthTokenErrorCodes.MISSING_KEY
    assert "token_key" in str(exc_info.value)


@pytest.mark.parametrize("key", [b"", b"short", b"x" * 32])
def test_resolve_key_wrong_length_raises(key: bytes) -> None:
    with pytest.raises(AuthTokenError) as exc_info:
        resolve_key(TokenConfig(token_key=key), AuthTokenSettings())
    assert exc_info.value.code == AuthTokenErrorCodes.INVALID_KEY


def test_resolve_key_accepts_base64url_string() -> None:
    """文字列鍵は base64url としてデコードされること（パディング有無どちらも可）。"""
    encoded = base64url_encode(KEY_A)
    assert resolve_key(TokenConfig(token_key=encoded), AuthTokenSettings()) == KEY_A
    assert resolve_key(TokenConfig(token_key=encoded + "=="), AuthTokenSettings()) == KEY_A


def test_resolve_key_accepts_bytearray() -> None:
    assert resolve_key(TokenConfig(token_key=bytearray(KEY_B)), AuthTokenSettings()) == KEY_B  # type: ignore[arg-type]


@pytest.mark.parametrize("key", ["0123456789abcdef", "!!!not-base64!!!", 1234])
def test_resolve_key_rejects_invalid_key_types(key: object) -> None:
    """16 文字の文字列や bytes 以外の値は INVALID_KEY になること。"""
    with pytest.raises(AuthTokenError) as exc_info:
        resolve_key(TokenConfig(token_key=key), AuthTokenSettings())  # type: ignore[arg-type]
    assert exc_info.value.code == AuthTokenErrorCodes.INVALID_KEY
