"""HTTP リクエストからの Bearer トークン抽出"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_AUTHORIZATION = "authorization"
_BEARER_RE = re.compile(r"\s*(?:bearer(?::\s*|\s+))?(.*?)\s*", re.IGNORECASE | re.DOTALL)


def _first_header(headers: Any, name: str) -> str | None:
    """ヘッダーの最初の値を返す。複数値ヘッダー API があればそちらを使う。"""
    for attr in ("get_list", "getlist", "getall", "get_all"):
        getter = getattr(headers, attr, None)
        if callable(getter):
            try:
                values = getter(name)
            except KeyError:
                return None
            return values[0] if values else None
    if isinstance(headers, Mapping):
        for key, value in headers.items():
            if isinstance(key, str) and key.lower() == name:
                return value
        return None
    getter = getattr(headers, "get", None)
    return getter(name) if callable(getter) else None


def extract_bearer_token(request: Any) -> str | None:
    """リクエスト（またはヘッダーのマッピング）の authorization ヘッダーからトークンを取り出す。

    `Bearer xxx` / `bearer: xxx` / `xxx` のいずれも `xxx` を返す。
    ヘッダーが無い、またはトークン部分が空の場合は None。
    """
    headers = getattr(request, "headers", request)
    if headers is None:
        return None
    value = _first_header(headers, _AUTHORIZATION)
    if isinstance(value, bytes):
        value = value.decode("latin-1")
    if not isinstance(value, str):
        return None
    match = _BEARER_RE.fullmatch(value)
    token = match.group(1) if match else ""
    if not token or token.lower() in ("bearer", "bearer:"):
        return None
    return token
