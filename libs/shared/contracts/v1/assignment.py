from __future__ import annotations

from typing import Literal

from domain.assignment.model import AssignmentContext, StrategyKind
from domain.types import AgentCandidate
from pydantic import BaseModel, Field


class CandidateIn(BaseModel):
    user_id: str = Field(min_length=1)
    max_concurrent: int = Field(ge=0)


class AssignRequest(BaseModel):
    """Snapshot of one queue at decision time."""

    api: Literal["v1"] = "v1"
    tenant_id: str | None = None
    group_key: str | None = None
    last_agent_user_id: str | None = None
    candidates: list[CandidateIn] = []
    active_loads: dict[str, int] | None = None

    def to_context(self) -> AssignmentContext:
        return AssignmentContext.build(
            self.tenant_id,
            self.group_key,
            self.last_agent_user_id,
            (AgentCandidate(c.user_id, c.max_concurrent) for c in self.candidates),
            self.active_loads,
        )


class AssignResponse(BaseModel):
    api: Literal["v1"] = "v1"
    agent_user_id: str | None = None
    group_key: str
    strategy: str | None = None
    kind: StrategyKind | None = None
    fell_back: bool = False
