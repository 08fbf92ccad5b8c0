"""トークン設定（pydantic BaseModel）とプロセス全体のデフォルト設定"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .codec import base64url_decode
from .exceptions import AuthTokenError, AuthTokenErrorCodes

DEFAULT_TIMEOUT = 86400  # 1 day
DEFAULT_REFRESH = 1800  # 30 min

_SECTION = "authtoken"


class AuthTokenSettings(BaseModel):
    """プロセス全体のトークン設定。"""

    token_key: bytes | None = Field(default=None, repr=False)
    timeout: int = Field(default=DEFAULT_TIMEOUT, ge=0)
    refresh: int = Field(default=DEFAULT_REFRESH, ge=0)

    @field_validator("token_key", mode="before")
    @classmethod
    def decode_token_key(cls, value: Any) -> Any:
        """YAML などから渡された base64url 文字列をバイト列に変換する。"""
        if isinstance(value, str):
            try:
                return base64url_decode(value.strip().rstrip("="))
            except ValueError as e:
                raise ValueError("token_key must be base64url encoded") from e
        return value


@dataclass(frozen=True)
class TokenConfig:
    """呼び出し単位の設定上書き。None のフィールドはデフォルト設定を使う。"""

    token_key: bytes | str | None = field(default=None, repr=False)
    timeout: int | None = None
    refresh: int | None = None


_settings = AuthTokenSettings()


def configure(settings: AuthTokenSettings) -> None:
    """プロセス全体のデフォルト設定を登録する。起動時に一度だけ呼ぶ想定。"""
    global _settings
    _settings = settings


def get_settings() -> AuthTokenSettings:
    return _settings


def reset_settings() -> None:
    """デフォルト設定を初期状態に戻す。"""
    configure(AuthTokenSettings())


def resolve_timeout(config: TokenConfig | None, settings: AuthTokenSettings) -> int:
    if config is not None and config.timeout is not None:
        return config.timeout
    return settings.timeout


def resolve_refresh(config: TokenConfig | None, settings: AuthTokenSettings) -> int:
    if config is not None and config.refresh is not None:
        return config.refresh
    return settings.refresh


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise AuthTokenError(
            code=AuthTokenErrorCodes.CONFIG_READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise AuthTokenError(
            code=AuthTokenErrorCodes.CONFIG_PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def load(base_path: Path, env_path: Path | None = None) -> AuthTokenSettings:
    """設定ファイルの authtoken セクションを読み込んで AuthTokenSettings を返す。

    base_path: ベース設定ファイルパス（必須）
    env_path: 環境別設定ファイルパス（オプション）。存在する場合はベースにマージ。
    """
    data = _read_yaml(base_path)
    if env_path is not None and env_path.exists():
        data = _deep_merge(data, _read_yaml(env_path))
    try:
        return AuthTokenSettings.model_validate(data.get(_SECTION) or {})
    except ValidationError as e:
        # メッセージに鍵の値を含めない
        raise AuthTokenError(
            code=AuthTokenErrorCodes.CONFIG_VALIDATION,
            message=f"Config validation failed: {e.error_count()} error(s)",
            cause=e,
        ) from e
