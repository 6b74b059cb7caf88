from .config import TenantStrategyConfigPort
from .directory import (
    CandidateProviderPort,
    CandidateRecord,
    CursorProviderPort,
    LoadProviderPort,
)
from .telemetry import MetricsPort
from .time import ClockPort

__all__ = [
    "TenantStrategyConfigPort",
    "CandidateProviderPort",
    "CandidateRecord",
    "CursorProviderPort",
    "LoadProviderPort",
    "MetricsPort",
    "ClockPort",
]
