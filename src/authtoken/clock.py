"""現在時刻（Unix 秒）の取得"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """現在時刻を Unix エポック秒で返すインターフェース。"""

    def now(self) -> int: ...


class SystemClock:
    """システム時計。"""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """固定時刻を返すテスト用の時計。"""

    def __init__(self, now: int) -> None:
        self._now = now

    def now(self) -> int:
        return self._now

    def set(self, now: int) -> None:
        self._now = now

    def advance(self, seconds: int) -> None:
        """時刻を seconds 秒進める。"""
        self._now += seconds
