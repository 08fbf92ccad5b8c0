"""トークン発行・復号・リフレッシュの公開 API"""

from __future__ import annotations

from typing import Any

import structlog

from .clock import Clock, SystemClock
from .codec import TokenCodec
from .config import (
    AuthTokenSettings,
    TokenConfig,
    get_settings,
    resolve_refresh,
    resolve_timeout,
)
from .exceptions import AuthTokenError, AuthTokenErrorCodes
from .keys import resolve_key
from .lifecycle import LifecycleEvaluator
from .models import TokenPayload, TokenResult, TokenState
from .request import extract_bearer_token

logger = structlog.get_logger(__name__)

# 呼び出し側で回復可能なエラー。これ以外 (MISSING_KEY など) は例外のまま送出する。
_RESULT_CODES = frozenset(
    {
        AuthTokenErrorCodes.DECRYPT_FAILURE,
        AuthTokenErrorCodes.TIMED_OUT,
        AuthTokenErrorCodes.STILL_FRESH,
    }
)


def _as_payload(token: TokenPayload | dict[str, Any]) -> TokenPayload:
    if isinstance(token, TokenPayload):
        return token
    if not isinstance(token, dict):
        raise AuthTokenError(
            code=AuthTokenErrorCodes.DECRYPT_FAILURE,
            message=f"Unsupported token payload type: {type(token).__name__}",
        )
    try:
        return TokenPayload.from_dict(token)
    except ValueError as e:
        raise AuthTokenError(
            code=AuthTokenErrorCodes.DECRYPT_FAILURE,
            message="Token payload is missing timestamps",
            cause=e,
        ) from e


class AuthToken:
    """暗号化認証トークンの発行・検証クライアント。

    settings を省略した場合は呼び出し時点のプロセス全体設定 (config.configure) を使う。
    """

    def __init__(
        self,
        settings: AuthTokenSettings | None = None,
        clock: Clock | None = None,
        codec: TokenCodec | None = None,
    ) -> None:
        self._settings = settings
        self._clock = clock or SystemClock()
        self._codec = codec or TokenCodec()
        self._lifecycle = LifecycleEvaluator(self._clock)

    @property
    def settings(self) -> AuthTokenSettings:
        return self._settings if self._settings is not None else get_settings()

    def generate_token(
        self, claims: dict[str, Any], config: TokenConfig | None = None
    ) -> TokenResult[str]:
        """claims に ct / rt を加えたトークンを発行する。"""
        key = resolve_key(config, self.settings)
        payload = TokenPayload.issue(claims, self._clock.now())
        token = self._codec.encode(payload, key)
        logger.debug("token_issued", created_at=payload.created_at)
        return TokenResult.success(token)

    def decrypt_token(self, token: Any, config: TokenConfig | None = None) -> TokenResult[dict[str, Any]]:
        """トークン文字列、またはリクエストの authorization ヘッダーを復号する。"""
        key = resolve_key(config, self.settings)
        try:
            payload = self._decode(token, key)
        except AuthTokenError as e:
            return self._failure(e)
        return TokenResult.success(payload.to_dict())

    def refresh_token(
        self, token: TokenPayload | dict[str, Any] | str, config: TokenConfig | None = None
    ) -> TokenResult[str]:
        """リフレッシュが必要なら refreshed_at を更新した新しいトークンを返す。

        期限切れは TIMED_OUT、リフレッシュ不要なら STILL_FRESH を返す。
        """
        settings = self.settings
        key = resolve_key(config, settings)
        try:
            payload = self._decode(token, key) if isinstance(token, str) else _as_payload(token)
            refreshed = self._lifecycle.refresh(
                payload,
                resolve_timeout(config, settings),
                resolve_refresh(config, settings),
            )
        except AuthTokenError as e:
            return self._failure(e)
        new_token = self._codec.encode(refreshed, key)
        logger.info(
            "token_refreshed",
            created_at=refreshed.created_at,
            refreshed_at=refreshed.refreshed_at,
        )
        return TokenResult.success(new_token)

    def is_timed_out(self, token: TokenPayload | dict[str, Any], config: TokenConfig | None = None) -> bool:
        """作成時刻から timeout 秒を超えていれば True。

        Raises:
            AuthTokenError: ct / rt が整数でないマップを渡した場合 (DECRYPT_FAILURE)
        """
        return self._lifecycle.is_timed_out(_as_payload(token), resolve_timeout(config, self.settings))

    def needs_refresh(self, token: TokenPayload | dict[str, Any], config: TokenConfig | None = None) -> bool:
        """最終リフレッシュから refresh 秒を超えていれば True。ペイロードの扱いは is_timed_out と同じ。"""
        return self._lifecycle.needs_refresh(_as_payload(token), resolve_refresh(config, self.settings))

    def classify(self, token: TokenPayload | dict[str, Any], config: TokenConfig | None = None) -> TokenState:
        settings = self.settings
        return self._lifecycle.classify(
            _as_payload(token),
            resolve_timeout(config, settings),
            resolve_refresh(config, settings),
        )

    def _decode(self, token: Any, key: bytes) -> TokenPayload:
        if not isinstance(token, str):
            extracted = extract_bearer_token(token)
            if extracted is None:
                raise AuthTokenError(
                    code=AuthTokenErrorCodes.DECRYPT_FAILURE,
                    message="No bearer token in authorization header",
                )
            token = extracted
        return self._codec.decode(token, key)

    @staticmethod
    def _failure(error: AuthTokenError) -> TokenResult[Any]:
        if error.code not in _RESULT_CODES:
            raise error
        if error.code == AuthTokenErrorCodes.DECRYPT_FAILURE:
            # 失敗理由はログのみに残し、呼び出し側には区別せず返す
            logger.warning("token_decrypt_failed", reason=error.args[0])
        return TokenResult.failure(error.code)


_default = AuthToken()


def generate_token(claims: dict[str, Any], config: TokenConfig | None = None) -> TokenResult[str]:
    return _default.generate_token(claims, config)


def decrypt_token(token: Any, config: TokenConfig | None = None) -> TokenResult[dict[str, Any]]:
    return _default.decrypt_token(token, config)


def refresh_token(
    token: TokenPayload | dict[str, Any] | str, config: TokenConfig | None = None
) -> TokenResult[str]:
    return _default.refresh_token(token, config)


def is_timed_out(token: TokenPayload | dict[str, Any], config: TokenConfig | None = None) -> bool:
    return _default.is_timed_out(token, config)


def needs_refresh(token: TokenPayload | dict[str, Any], config: TokenConfig | None = None) -> bool:
    return _default.needs_refresh(token, config)


def classify(token: TokenPayload | dict[str, Any], config: TokenConfig | None = None) -> TokenState:
    return _default.classify(token, config)
