# libs/domain/assignment/service.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Final

from domain.errors import ConfigurationError
from domain.types import AgentCandidate
from ports.directory import (
    CandidateProviderPort,
    CandidateRecord,
    CursorProviderPort,
    LoadProviderPort,
)
from ports.telemetry import MetricsPort

from .model import (
    DEFAULT_GROUP_KEY,
    AssignmentContext,
    StrategyKind,
    is_blank,
    normalize_group_key,
)
from .resolver import StrategyResolver

LOG: Final = logging.getLogger("assignment.service")


@dataclass(frozen=True)
class AssignmentDecision:
    """Advisory result: the caller re-validates capacity when applying it."""

    agent_user_id: str | None
    group_key: str
    strategy_key: str | None = None
    kind: StrategyKind | None = None
    fell_back: bool = False

    @property
    def assigned(self) -> bool:
        return self.agent_user_id is not None


class AssignmentService:
    """Resolves the queue's policy and runs it against a snapshot (no I/O besides ports)."""

    def __init__(
        self,
        resolver: StrategyResolver,
        candidates: CandidateProviderPort | None = None,
        loads: LoadProviderPort | None = None,
        metrics: MetricsPort | None = None,
        cursors: CursorProviderPort | None = None,
    ) -> None:
        self.resolver: Final = resolver
        self.candidates: Final = candidates
        self.loads: Final = loads
        self.metrics: Final = metrics
        self.cursors: Final = cursors

    def assign(
        self,
        tenant_id: str | None,
        group_key: str | None,
        last_agent_user_id: str | None,
        candidates: Iterable[AgentCandidate],
        active_loads: Mapping[str, int] | None = None,
    ) -> str | None:
        ctx = AssignmentContext.build(
            tenant_id, group_key, last_agent_user_id, candidates, active_loads
        )
        return self.decide(ctx).agent_user_id

    def decide(self, ctx: AssignmentContext | None) -> AssignmentDecision:
        res = self.resolver.resolution(ctx)
        picked = res.strategy.select(ctx)
        decision = AssignmentDecision(
            agent_user_id=picked.user_id if picked is not None else None,
            group_key=normalize_group_key(ctx.group_key if ctx is not None else None),
            strategy_key=res.key,
            kind=res.kind,
            fell_back=res.fell_back,
        )
        self._observe(decision)
        return decision

    def route(
        self,
        tenant_id: str,
        group_key: str | None,
        last_agent_user_id: str | None = None,
        exclude_agent_user_id: str | None = None,
    ) -> AssignmentDecision:
        """Gather candidates, loads and the rotation cursor through the ports, then decide.

        A requested group with nobody online falls back to the tenant's
        default pool, and rotation then continues from that pool's cursor.
        `last_agent_user_id` overrides the stored cursor of the requested group
        only; it is ignored after a fallback. `exclude_agent_user_id` keeps a
        conversation from bouncing straight back to the agent it is being
        transferred away from.
        """
        if self.candidates is None or self.loads is None:
            raise ConfigurationError("route_requires_candidate_and_load_providers")

        effective = normalize_group_key(group_key)
        cursor = last_agent_user_id
        pool = list(self.candidates.candidates(tenant_id, effective))
        if effective != DEFAULT_GROUP_KEY and not pool:
            LOG.debug("group_empty_fallback tenant=%s group=%s", tenant_id, effective)
            effective = DEFAULT_GROUP_KEY
            cursor = None
            pool = list(self.candidates.candidates(tenant_id, effective))

        if not is_blank(exclude_agent_user_id):
            pool = [c for c in pool if c.user_id != exclude_agent_user_id]

        if not pool:
            # nobody online: stays queued, no policy needed
            decision = AssignmentDecision(agent_user_id=None, group_key=effective)
            self._observe(decision)
            return decision

        agents = [_as_candidate(c) for c in pool]
        loads = self.loads.active_loads(tenant_id, [c.user_id for c in agents])
        if is_blank(cursor) and self.cursors is not None:
            cursor = self.cursors.last_agent(tenant_id, effective)
        ctx = AssignmentContext.build(tenant_id, effective, cursor, agents, loads)
        return self.decide(ctx)

    def _observe(self, decision: AssignmentDecision) -> None:
        if self.metrics is None:
            return
        self.metrics.observe(
            "assignment.decision",
            1.0,
            strategy=decision.kind or "none",
            outcome="assigned" if decision.assigned else "queued",
        )


def _as_candidate(record: CandidateRecord) -> AgentCandidate:
    if isinstance(record, AgentCandidate):
        return record
    return AgentCandidate(user_id=record.user_id, max_concurrent=record.max_concurrent)
