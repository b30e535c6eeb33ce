"""Prometheus metrics for the shortlink service.

HTTP request metrics come from ``prometheus_fastapi_instrumentator`` in
``shortlink.main``; the counters here cover the domain events behind them.
"""

from prometheus_client import Counter

__all__ = [
    "ALLOCATIONS_TOTAL",
    "SLUG_COLLISIONS_TOTAL",
    "RESOLUTIONS_TOTAL",
    "CLICK_INCREMENTS_TOTAL",
]

ALLOCATIONS_TOTAL = Counter(
    "shortlink_allocations_total",
    "Shorten requests by outcome",
    ["outcome"],
)
SLUG_COLLISIONS_TOTAL = Counter(
    "shortlink_slug_collisions_total",
    "Generated slugs rejected by the store's uniqueness constraint",
)
RESOLUTIONS_TOTAL = Counter(
    "shortlink_resolutions_total",
    "Slug lookups by terminal state",
    ["state"],
)
CLICK_INCREMENTS_TOTAL = Counter(
    "shortlink_click_increments_total",
    "Background click increments by outcome",
    ["outcome"],
)
