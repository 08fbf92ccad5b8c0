"""authtoken ライブラリの例外型定義"""

from __future__ import annotations


class AuthTokenError(Exception):
    """authtoken ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class AuthTokenErrorCodes:
    """AuthTokenError のエラーコード定数。"""

    MISSING_KEY: str = "MISSING_KEY"
    INVALID_KEY: str = "INVALID_KEY"
    DECRYPT_FAILURE: str = "DECRYPT_FAILURE"
    TIMED_OUT: str = "TIMED_OUT"
    STILL_FRESH: str = "STILL_FRESH"
    CONFIG_READ_FILE: str = "CONFIG_READ_FILE_ERROR"
    CONFIG_PARSE_YAML: str = "CONFIG_PARSE_YAML_ERROR"
    CONFIG_VALIDATION: str = "CONFIG_VALIDATION_ERROR"
