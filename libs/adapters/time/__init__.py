from .fakes import FakeClockPort
from .monotonic import MonotonicClockPort

__all__ = ["FakeClockPort", "MonotonicClockPort"]
