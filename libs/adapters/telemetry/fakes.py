from __future__ import annotations

from ports.telemetry import MetricsPort


class FakeMetricsPort(MetricsPort):
    def __init__(self) -> None:
        self.samples: list[tuple[str, float, dict[str, str]]] = []

    def observe(self, name: str, value: float, **labels: str) -> None:
        self.samples.append((name, float(value), labels))

    def count(self, name: str, **labels: str) -> int:
        """Samples named `name` whose labels include every given label."""
        return sum(
            1
            for n, _, lbl in self.samples
            if n == name and all(lbl.get(k) == v for k, v in labels.items())
        )
