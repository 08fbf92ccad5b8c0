"""トークンのデータモデル"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from .exceptions import AuthTokenError

CREATED_AT_KEY = "ct"
REFRESHED_AT_KEY = "rt"

T = TypeVar("T")


class TokenState(str, Enum):
    """トークンのライフサイクル状態。"""

    FRESH = "fresh"
    STALE = "stale"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TokenPayload:
    """暗号化前のトークン本体（クレーム + タイムスタンプ）。"""

    claims: dict[str, Any] = field(default_factory=dict)
    created_at: int = 0
    refreshed_at: int = 0

    @classmethod
    def issue(cls, claims: dict[str, Any], now: int) -> TokenPayload:
        """発行時刻 now で新しいペイロードを作る。"""
        return cls(claims=_strip_reserved(claims), created_at=now, refreshed_at=now)

    def with_refreshed_at(self, now: int) -> TokenPayload:
        """refreshed_at だけを更新したペイロードを返す。"""
        return TokenPayload(claims=dict(self.claims), created_at=self.created_at, refreshed_at=now)

    def to_dict(self) -> dict[str, Any]:
        # タイムスタンプがクレームの同名キーを上書きする
        d: dict[str, Any] = dict(self.claims)
        d[CREATED_AT_KEY] = self.created_at
        d[REFRESHED_AT_KEY] = self.refreshed_at
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenPayload:
        """復号済みのマップからペイロードを組み立てる。

        ct / rt が整数でない場合は ValueError を送出する。
        """
        ct = data.get(CREATED_AT_KEY)
        rt = data.get(REFRESHED_AT_KEY)
        if not _is_timestamp(ct) or not _is_timestamp(rt):
            raise ValueError("token payload is missing integer ct/rt fields")
        return cls(claims=_strip_reserved(data), created_at=ct, refreshed_at=rt)


@dataclass(frozen=True)
class TokenResult(Generic[T]):
    """公開 API の戻り値。成功時は value、失敗時は error にエラーコードを持つ。"""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> TokenResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, code: str) -> TokenResult[T]:
        return cls(error=code)

    def unwrap(self) -> T:
        """value を返す。失敗結果の場合は AuthTokenError を送出する。"""
        if self.error is not None:
            raise AuthTokenError(code=self.error, message=f"Token operation failed: {self.error}")
        return self.value  # type: ignore[return-value]


def _strip_reserved(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in (CREATED_AT_KEY, REFRESHED_AT_KEY)}


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
