# libs/domain/assignment/strategies.py
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from domain.types import AgentCandidate

from .model import AssignmentContext


class AssignmentStrategy(ABC):
    """Pure decision function: no state, safe to share across threads."""

    @abstractmethod
    def select(self, ctx: AssignmentContext | None) -> AgentCandidate | None: ...


def _cursor_start(candidates: Sequence[AgentCandidate], last: str | None) -> int:
    """Index right after the first occurrence of `last`, wrapping; 0 if absent."""
    if last is None:
        return 0
    for i, c in enumerate(candidates):
        if c.user_id == last:
            return (i + 1) % len(candidates)
    return 0


class RoundRobinStrategy(AssignmentStrategy):
    """First candidate with spare capacity after the rotation cursor."""

    def select(self, ctx: AssignmentContext | None) -> AgentCandidate | None:
        if ctx is None or not ctx.candidates:
            return None

        candidates = ctx.candidates
        n = len(candidates)
        start = _cursor_start(candidates, ctx.cursor)
        for offset in range(n):
            c = candidates[(start + offset) % n]
            if c.has_capacity(ctx.active_for(c.user_id)):
                return c
        return None


class LeastOpenStrategy(AssignmentStrategy):
    """Least-loaded eligible candidate; rotate among equally-loaded ones."""

    def select(self, ctx: AssignmentContext | None) -> AgentCandidate | None:
        if ctx is None or not ctx.candidates:
            return None

        min_active: int | None = None
        tie: list[AgentCandidate] = []
        for c in ctx.candidates:
            active = ctx.active_for(c.user_id)
            if not c.has_capacity(active):
                continue
            if min_active is None or active < min_active:
                min_active = active
                tie = [c]
            elif active == min_active:
                tie.append(c)

        if not tie:
            return None
        # rotation memory resets to 0 when the last agent is not in the tie set
        return tie[_cursor_start(tie, ctx.cursor)]


class ManualStrategy(AssignmentStrategy):
    """Never auto-assigns; conversations wait for an explicit claim."""

    def select(self, ctx: AssignmentContext | None) -> AgentCandidate | None:
        return None
