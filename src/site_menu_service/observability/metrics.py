"""Custom metrics for the menu service."""

from opentelemetry import metrics

meter = metrics.get_meter("menu-svc")

cache_hit_counter = meter.create_counter(
    name="menu_cache_hits_total",
    description="Menu reads served from the cache by location",
    unit="1",
)

cache_miss_counter = meter.create_counter(
    name="menu_cache_misses_total",
    description="Menu reads that missed or found an expired cache entry by location",
    unit="1",
)

cache_invalidation_counter = meter.create_counter(
    name="menu_cache_invalidations_total",
    description="Cache entries dropped by mutators or global clears",
    unit="1",
)

tree_build_duration_histogram = meter.create_histogram(
    name="menu_tree_build_duration_seconds",
    description="Time spent assembling a menu forest from flat items",
    unit="s",
)


def record_cache_hit(location: str) -> None:
    """Record a cache hit for a location."""
    cache_hit_counter.add(1, {"location": location})


def record_cache_miss(location: str) -> None:
    """Record a cache miss for a location."""
    cache_miss_counter.add(1, {"location": location})


def record_cache_invalidation(location: str) -> None:
    """Record a dropped cache entry.

    Args:
        location: Location cleared, or "*" for a global clear
    """
    cache_invalidation_counter.add(1, {"location": location})


def record_tree_build_duration(location: str, duration_seconds: float) -> None:
    """Record how long assembling a location's menu took.

    Args:
        location: Location whose menu was built
        duration_seconds: Duration in seconds
    """
    tree_build_duration_histogram.record(duration_seconds, {"location": location})
