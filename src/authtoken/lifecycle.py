"""トークンの有効期限・リフレッシュ判定"""

from __future__ import annotations

import structlog

from .clock import Clock, SystemClock
from .exceptions import AuthTokenError, AuthTokenErrorCodes
from .models import TokenPayload, TokenState

logger = structlog.get_logger(__name__)


class LifecycleEvaluator:
    """作成時刻・リフレッシュ時刻からトークンの状態を判定する。

    状態は EXPIRED → FRESH → STALE の優先順で決まる。サーバー側には何も保持しない。
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()

    def is_timed_out(self, payload: TokenPayload, timeout: int) -> bool:
        """作成時刻から timeout 秒を超えていれば True。"""
        return self._clock.now() - payload.created_at > timeout

    def needs_refresh(self, payload: TokenPayload, refresh: int) -> bool:
        """最終リフレッシュから refresh 秒を超えていれば True。"""
        return self._clock.now() - payload.refreshed_at > refresh

    def classify(self, payload: TokenPayload, timeout: int, refresh: int) -> TokenState:
        if self.is_timed_out(payload, timeout):
            return TokenState.EXPIRED
        if not self.needs_refresh(payload, refresh):
            return TokenState.FRESH
        return TokenState.STALE

    def refresh(self, payload: TokenPayload, timeout: int, refresh: int) -> TokenPayload:
        """STALE なトークンの refreshed_at を現在時刻に更新したペイロードを返す。

        Raises:
            AuthTokenError: 期限切れ (TIMED_OUT) またはリフレッシュ不要 (STILL_FRESH) の場合
        """
        state = self.classify(payload, timeout, refresh)
        if state is TokenState.EXPIRED:
            logger.info("token_refresh_rejected", state=state.value, created_at=payload.created_at)
            raise AuthTokenError(code=AuthTokenErrorCodes.TIMED_OUT, message="Token has timed out")
        if state is TokenState.FRESH:
            raise AuthTokenError(code=AuthTokenErrorCodes.STILL_FRESH, message="Token does not need a refresh yet")
        return payload.with_refreshed_at(self._clock.now())
