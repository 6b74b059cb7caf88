from .fakes import FakeMetricsPort
from .logging_metrics import LoggingMetricsPort

__all__ = ["FakeMetricsPort", "LoggingMetricsPort"]
