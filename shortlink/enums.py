"""Shared enums for the shortlink service.

Using enums instead of string literals keeps metric labels, health payloads
and resolution outcomes consistent across modules.
"""

from enum import StrEnum

__all__ = ["HealthStatus", "ResolutionState", "AllocationOutcome", "ClickOutcome"]


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ResolutionState(StrEnum):
    """Terminal states of a slug lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


class AllocationOutcome(StrEnum):
    """Outcomes of a shorten request, used as a metric label."""

    SUCCESS = "success"
    INVALID = "invalid"
    CONFLICT = "conflict"
    EXHAUSTED = "exhausted"
    STORE_ERROR = "store_error"


class ClickOutcome(StrEnum):
    """Outcomes of a background click increment."""

    APPLIED = "applied"
    FAILED = "failed"
    DROPPED = "dropped"
