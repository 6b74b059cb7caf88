from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Protocol


class CandidateRecord(Protocol):
    user_id: str
    max_concurrent: int


class CandidateProviderPort(ABC):
    """Online agents eligible for a queue, in rotation order."""

    @abstractmethod
    def candidates(self, tenant_id: str, group_key: str) -> Sequence[CandidateRecord]: ...


class LoadProviderPort(ABC):
    """Current active-assignment counts; agents missing from the result have zero."""

    @abstractmethod
    def active_loads(self, tenant_id: str, user_ids: Sequence[str]) -> Mapping[str, int]: ...


class CursorProviderPort(ABC):
    """Rotation cursor per queue: the agent that last received a conversation there."""

    @abstractmethod
    def last_agent(self, tenant_id: str, group_key: str) -> str | None: ...
