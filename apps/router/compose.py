from __future__ import annotations

from adapters.inmemory import InMemoryAgentDirectory, InMemoryStrategyConfig
from adapters.telemetry import LoggingMetricsPort
from adapters.time import MonotonicClockPort
from domain.assignment import (
    AssignmentService,
    StrategyRegistry,
    StrategyResolver,
    default_registry,
)
from ports.config import TenantStrategyConfigPort
from ports.directory import CandidateProviderPort, CursorProviderPort, LoadProviderPort
from ports.telemetry import MetricsPort
from ports.time import ClockPort

from apps.router.settings import RouterSettings


def build_registry(settings: RouterSettings) -> StrategyRegistry:
    return default_registry(settings.strategy_aliases)


def build_config(settings: RouterSettings) -> InMemoryStrategyConfig:
    return InMemoryStrategyConfig.from_mapping(settings.tenant_strategies)


def build_resolver(
    settings: RouterSettings,
    config: TenantStrategyConfigPort | None = None,
    clock: ClockPort | None = None,
) -> StrategyResolver:
    return StrategyResolver(
        registry=build_registry(settings),
        config=config if config is not None else build_config(settings),
        clock=clock if clock is not None else MonotonicClockPort(),
        global_default_key=settings.global_strategy,
        ttl_ms=settings.cache_ttl_ms,
    )


def build_service(
    settings: RouterSettings,
    *,
    config: TenantStrategyConfigPort | None = None,
    clock: ClockPort | None = None,
    candidates: CandidateProviderPort | None = None,
    loads: LoadProviderPort | None = None,
    metrics: MetricsPort | None = None,
    cursors: CursorProviderPort | None = None,
) -> AssignmentService:
    """Wire the engine. Providers default to one shared in-memory directory."""
    if candidates is None and loads is None:
        directory = InMemoryAgentDirectory()
        candidates, loads = directory, directory
        if cursors is None:
            cursors = directory
    return AssignmentService(
        resolver=build_resolver(settings, config=config, clock=clock),
        candidates=candidates,
        loads=loads,
        metrics=metrics if metrics is not None else LoggingMetricsPort(),
        cursors=cursors,
    )
