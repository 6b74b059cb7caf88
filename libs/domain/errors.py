from __future__ import annotations


class AssignmentError(Exception):
    """Base for engine failures. "Nobody has capacity" is never one of these."""


class InvalidArgumentError(AssignmentError, ValueError):
    """Malformed or missing input; a caller bug, not retried."""


class ConfigurationError(AssignmentError, RuntimeError):
    """No usable strategy could be found (deployment misconfiguration)."""
