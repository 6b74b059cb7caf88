from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class AgentCandidate:
    user_id: str
    max_concurrent: int

    def __post_init__(self) -> None:
        if self.max_concurrent < 0:
            raise InvalidArgumentError(f"max_concurrent must be >= 0 (user_id={self.user_id})")

    def has_capacity(self, active: int) -> bool:
        return active < self.max_concurrent
