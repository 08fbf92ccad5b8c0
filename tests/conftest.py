"""authtoken テスト共通フィクスチャ"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog
from authtoken.config import reset_settings


@pytest.fixture(autouse=True)
def _reset_state() -> Iterator[None]:
    """テスト間でプロセス全体設定と structlog 設定を持ち越さない。"""
    yield
    reset_settings()
    structlog.reset_defaults()
