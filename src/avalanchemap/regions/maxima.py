"""Normalization maxima across the region dataset.

Maxima are a derived value of one dataset snapshot: recompute them from the
full dataset whenever it is replaced, never update them incrementally.
"""

from typing import Iterable, Mapping, Optional, Union

from avalanchemap.regions.models import RegionSummary
from avalanchemap.regions.store import iter_summaries

MaxCounts = dict[str, int]


def compute_maxima(
    summaries: Union[Mapping[str, RegionSummary], Iterable[RegionSummary], None],
) -> MaxCounts:
    """Compute the maximum count per metric key across all regions.

    Danger levels and avalanche problem keys share one namespace ("1".."5"
    vs. snake_case problem keys), so both land in a single mapping.

    Args:
        summaries: Region summaries (store, code mapping or sequence)

    Returns:
        Dictionary of metric key -> maximum count. Keys that never appear in
        any region are absent.

    Example:
        >>> compute_maxima([
        ...     RegionSummary("A", rating_counts={"3": 5}),
        ...     RegionSummary("B", rating_counts={"3": 9}),
        ... ])
        {'3': 9}
    """
    maxima: MaxCounts = {}
    for summary in iter_summaries(summaries):
        for counts in (summary.rating_counts, summary.avalanche_problem_counts):
            for key, count in counts.items():
                if key not in maxima or count > maxima[key]:
                    maxima[key] = count
    return maxima


def max_for(maxima: Optional[Mapping[str, int]], key: str) -> int:
    """Look up a maximum, defaulting to 1 for absent or non-positive values.

    Args:
        maxima: Result of compute_maxima (or None before any dataset loaded)
        key: Metric key

    Returns:
        Maximum to normalize by, always >= 1
    """
    if not maxima:
        return 1
    value = maxima.get(key, 0)
    return value if value > 0 else 1
