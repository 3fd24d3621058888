"""
Shared utilities for load test statistics: percentiles, averages and rates.
"""

import math
import logging
from typing import Dict, Iterable, Sequence

from configuration import PERCENTILE_POINTS, MS_PER_SECOND

logger = logging.getLogger(__name__)


def percentile(sorted_values: Sequence[float], point: float) -> float:
    """
    Return the index-based percentile of an ascending-sorted sequence.

    The value at rank floor(n * point), clamped to [0, n - 1], is returned.
    No interpolation is done so results are reproducible across runs and
    tools reading the same latencies.

    Args:
        sorted_values: Latencies sorted in ascending order
        point: Percentile as a fraction (0.5 for p50)

    Returns:
        The selected value, or 0.0 for an empty sequence
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    index = min(max(math.floor(n * point), 0), n - 1)
    return sorted_values[index]


def percentiles(latencies: Iterable[float]) -> Dict[str, float]:
    """
    Calculate p50/p95/p99 of successful latencies.

    Args:
        latencies: Non-negative latencies of successful operations, any order

    Returns:
        Dictionary with p50, p95 and p99 (all 0.0 when there are no latencies)
    """
    ordered = sorted(latencies)
    return {name: percentile(ordered, point) for name, point in PERCENTILE_POINTS.items()}


def calculate_average(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def calculate_rate(count: float, wall_clock_ms: float) -> float:
    """
    Calculate a per-second rate from a count and a duration in milliseconds.

    Args:
        count: Units (or operations) completed
        wall_clock_ms: Duration in milliseconds

    Returns:
        count per second, 0.0 when the duration is not positive
    """
    if wall_clock_ms <= 0:
        return 0.0
    return count / wall_clock_ms * MS_PER_SECOND
