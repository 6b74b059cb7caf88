from .model import (
    DEFAULT_GROUP_KEY,
    LEAST_OPEN,
    MANUAL,
    ROUND_ROBIN,
    WILDCARD_GROUP_KEY,
    AssignmentContext,
    normalize_group_key,
    normalize_strategy_key,
)
from .registry import Resolution, StrategyRegistry, default_registry
from .resolver import CACHE_TTL_MS, StrategyResolver
from .service import AssignmentDecision, AssignmentService
from .strategies import AssignmentStrategy, LeastOpenStrategy, ManualStrategy, RoundRobinStrategy

__all__ = [
    "AssignmentContext",
    "AssignmentDecision",
    "AssignmentService",
    "AssignmentStrategy",
    "CACHE_TTL_MS",
    "DEFAULT_GROUP_KEY",
    "LEAST_OPEN",
    "LeastOpenStrategy",
    "MANUAL",
    "ManualStrategy",
    "ROUND_ROBIN",
    "Resolution",
    "RoundRobinStrategy",
    "StrategyRegistry",
    "StrategyResolver",
    "WILDCARD_GROUP_KEY",
    "default_registry",
    "normalize_group_key",
    "normalize_strategy_key",
]
