from __future__ import annotations

from abc import ABC, abstractmethod


class ClockPort(ABC):
    """Monotonic seconds. Only differences between readings are meaningful."""

    @abstractmethod
    def now(self) -> float: ...
