from __future__ import annotations

from abc import ABC, abstractmethod


class MetricsPort(ABC):
    # keep labels low-cardinality: never tag by tenant, agent or conversation
    @abstractmethod
    def observe(self, name: str, value: float, **labels: str) -> None: ...
