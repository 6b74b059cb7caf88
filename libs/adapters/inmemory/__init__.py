from .config import InMemoryStrategyConfig
from .directory import InMemoryAgentDirectory
from .fakes import CountingStrategyConfig

__all__ = [
    "InMemoryStrategyConfig",
    "InMemoryAgentDirectory",
    "CountingStrategyConfig",
]
