from __future__ import annotations

import logging
from typing import Final

from ports.telemetry import MetricsPort

LOG: Final = logging.getLogger("assignment.metrics")


class LoggingMetricsPort(MetricsPort):
    """Writes each sample as a debug log line (no metrics backend in-process)."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or LOG

    def observe(self, name: str, value: float, **labels: str) -> None:
        if not self._log.isEnabledFor(logging.DEBUG):
            return
        tags = " ".join(f"{k}={v}" for k, v in sorted(labels.items()))
        self._log.debug("metric name=%s value=%s %s", name, value, tags)
