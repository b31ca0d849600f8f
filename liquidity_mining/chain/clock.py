"""
시각 공급자

원장은 주입된 clock.now() (unix 초) 로만 시간을 읽습니다.
"""

import time


class SystemClock:
    """시스템 시각 (unix 초)"""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """수동으로 진행하는 시각 (테스트, 시뮬레이션용)

    사용법:
        clock = ManualClock(start=1_700_000_000)
        clock.advance(86400)
    """

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """seconds 만큼 진행하고 새 시각 반환"""
        if seconds < 0:
            raise ValueError(f"시각은 되돌릴 수 없습니다: {seconds}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int):
        if timestamp < self._now:
            raise ValueError(f"시각은 되돌릴 수 없습니다: {timestamp} < {self._now}")
        self._now = timestamp
