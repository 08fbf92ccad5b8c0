"""authtoken のログ出力設定"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

LOGGER_NAME = "authtoken"

# イベントに付けてはならないキー
_SECRET_KEYS = frozenset({"token_key", "key", "token", "authorization"})


def drop_secrets(_logger: Any, _method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """鍵やトークンを含みうるキーをイベントから取り除く structlog プロセッサ。"""
    for name in _SECRET_KEYS.intersection(event_dict):
        del event_dict[name]
    return event_dict


def configure_logging(
    level: str = "INFO",
    format: str = "json",
    stream: IO[str] | None = None,
) -> structlog.stdlib.BoundLogger:
    """authtoken ロガー配下のイベント出力を設定する。

    ルートロガーには触れず、"authtoken" ロガーにハンドラーを 1 つだけ付ける。
    再度呼ぶと以前のハンドラーは置き換えられる。

    Args:
        level: ログレベル ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        format: 出力形式 ("json" or "text")
        stream: 出力先。省略時は標準出力
    """
    stdlib_logger = logging.getLogger(LOGGER_NAME)
    stdlib_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(stdlib_logger.handlers):
        if getattr(handler, "_authtoken", False):
            stdlib_logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler._authtoken = True  # type: ignore[attr-defined]
    stdlib_logger.addHandler(handler)

    renderer: structlog.types.Processor
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            drop_secrets,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # モジュールロガーは常に最新の設定で束縛する
        cache_logger_on_first_use=False,
    )

    return structlog.stdlib.get_logger(LOGGER_NAME)
