from .errors import AssignmentError, ConfigurationError, InvalidArgumentError
from .types import AgentCandidate

__all__ = [
    "AgentCandidate",
    "AssignmentError",
    "ConfigurationError",
    "InvalidArgumentError",
]
