from __future__ import annotations

import time

from ports.time import ClockPort


class MonotonicClockPort(ClockPort):
    """Wall-clock using time.monotonic; immune to system clock changes."""

    def now(self) -> float:
        return time.monotonic()
