"""Super-region aggregation for the pie chart view.

Groups micro-regions into the fixed set of super-regions by code prefix and
sums their danger level and avalanche problem counts. The aggregate view
draws one pie chart per super-region at its anchor coordinate.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

import pandas as pd

from avalanchemap.regions.models import (
    AVALANCHE_PROBLEMS,
    DANGER_LEVELS,
    PROBLEM_KEY_TO_LABEL,
    FilterCategory,
    RegionSummary,
    SuperRegion,
)
from avalanchemap.regions.store import iter_summaries
from avalanchemap.visualization.colors import AVALANCHE_PROBLEM_COLORS, DANGER_LEVEL_COLORS

logger = logging.getLogger(__name__)

# (code prefix, super-region), evaluated in order, first match wins
SUPER_REGION_RULES = [
    ("CH", SuperRegion.CH),
    ("DE", SuperRegion.DE),
    ("AT-07", SuperRegion.AT_07),
    ("AT-08", SuperRegion.AT_08),
    ("AT-05", SuperRegion.AT_05),
    ("AT", SuperRegion.AT_OTHER),
    ("IT-32-BZ", SuperRegion.IT_32_BZ),
    ("IT", SuperRegion.IT_OTHER),
]

# Slice order of the avalanche problem pie chart
PIE_PROBLEM_ORDER = (
    "wind_drifted_snow",
    "new_snow",
    "wet_snow",
    "gliding_snow",
    "persistent_weak_layers",
)


@dataclass(frozen=True)
class SuperRegionTotals:
    """Accumulated counts of all micro-regions in one super-region.

    Totals are read-only once built; the count mappings are wrapped in
    MappingProxyType since snapshots share them between sessions.

    Attributes:
        super_region: The super-region these totals belong to
        danger_levels: Danger level -> summed count (all levels present)
        avalanche_problems: Problem key -> summed count (all keys present)
        region_count: Number of micro-regions that contributed
    """

    super_region: SuperRegion
    danger_levels: Mapping[str, int] = field(
        default_factory=lambda: {level: 0 for level in DANGER_LEVELS}
    )
    avalanche_problems: Mapping[str, int] = field(
        default_factory=lambda: {problem: 0 for problem in AVALANCHE_PROBLEMS}
    )
    region_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "danger_levels", MappingProxyType(dict(self.danger_levels)))
        object.__setattr__(
            self, "avalanche_problems", MappingProxyType(dict(self.avalanche_problems))
        )

    @classmethod
    def from_summaries(
        cls,
        super_region: SuperRegion,
        summaries: Iterable[RegionSummary],
    ) -> "SuperRegionTotals":
        """Sum the counts of the given member regions."""
        danger_levels = {level: 0 for level in DANGER_LEVELS}
        avalanche_problems = {problem: 0 for problem in AVALANCHE_PROBLEMS}
        region_count = 0

        for summary in summaries:
            for level, count in summary.rating_counts.items():
                danger_levels[level] = danger_levels.get(level, 0) + count
            for problem, count in summary.avalanche_problem_counts.items():
                avalanche_problems[problem] = avalanche_problems.get(problem, 0) + count
            region_count += 1

        return cls(super_region, danger_levels, avalanche_problems, region_count)

    @property
    def total_ratings(self) -> int:
        """Sum of all danger level counts."""
        return sum(self.danger_levels.values())

    @property
    def total_problems(self) -> int:
        """Sum of all avalanche problem counts."""
        return sum(self.avalanche_problems.values())

    def counts_for(self, category: FilterCategory) -> Mapping[str, int]:
        """Counts of the given metric family."""
        if category is FilterCategory.DANGER_LEVEL:
            return self.danger_levels
        return self.avalanche_problems


def classify_super_region(code: Optional[str]) -> Optional[SuperRegion]:
    """Determine the super-region of a micro-region code.

    Args:
        code: Micro-region code (e.g. "AT-07-01")

    Returns:
        SuperRegion, or None for codes outside all super-regions

    Examples:
        >>> classify_super_region("AT-07-01").code
        'AT-07'
        >>> classify_super_region("FR-01") is None
        True
    """
    if not isinstance(code, str):
        return None
    for prefix, super_region in SUPER_REGION_RULES:
        if code.startswith(prefix):
            return super_region
    return None


def empty_totals() -> dict[SuperRegion, SuperRegionTotals]:
    """Zero-filled totals for every super-region."""
    return {super_region: SuperRegionTotals(super_region) for super_region in SuperRegion}


def aggregate(
    summaries: Union[Mapping[str, RegionSummary], Iterable[RegionSummary], None],
) -> dict[SuperRegion, SuperRegionTotals]:
    """Sum micro-region counts into super-region totals.

    Args:
        summaries: Region summaries (store, code mapping or sequence)

    Returns:
        Totals for all 8 super-regions, each pre-seeded with every known
        danger level and avalanche problem at zero. Regions whose code
        matches no super-region are left out.
    """
    members: dict[SuperRegion, list[RegionSummary]] = {
        super_region: [] for super_region in SuperRegion
    }
    dropped = 0

    for summary in iter_summaries(summaries):
        super_region = classify_super_region(summary.code)
        if super_region is None:
            dropped += 1
            continue
        members[super_region].append(summary)

    if dropped:
        logger.debug(f"{dropped} region(s) outside all super-regions")
    return {
        super_region: SuperRegionTotals.from_summaries(super_region, regions)
        for super_region, regions in members.items()
    }


def pie_chart_data(totals: SuperRegionTotals, category: FilterCategory) -> dict:
    """Chart-ready slices for one super-region.

    Args:
        totals: Totals of one super-region
        category: Metric family to chart

    Returns:
        Dictionary with ``labels``, ``values`` and ``colors`` lists in chart
        slice order
    """
    if category is FilterCategory.DANGER_LEVEL:
        return {
            "labels": list(DANGER_LEVELS),
            "values": [totals.danger_levels.get(level, 0) for level in DANGER_LEVELS],
            "colors": list(DANGER_LEVEL_COLORS),
        }

    return {
        "labels": [PROBLEM_KEY_TO_LABEL[key] for key in PIE_PROBLEM_ORDER],
        "values": [totals.avalanche_problems.get(key, 0) for key in PIE_PROBLEM_ORDER],
        "colors": list(AVALANCHE_PROBLEM_COLORS),
    }


def totals_to_dataframe(totals: Mapping[SuperRegion, SuperRegionTotals]) -> pd.DataFrame:
    """Flatten super-region totals to one row per super-region.

    Returns:
        DataFrame with columns super_region, lon, lat, region_count,
        ``rating_1`` .. ``rating_5`` and one column per problem key
    """
    rows = []
    for super_region in SuperRegion:
        entry = totals.get(super_region) or SuperRegionTotals(super_region)
        row = {
            "super_region": super_region.code,
            "lon": super_region.lon,
            "lat": super_region.lat,
            "region_count": entry.region_count,
        }
        for level in DANGER_LEVELS:
            row[f"rating_{level}"] = entry.danger_levels.get(level, 0)
        for problem in AVALANCHE_PROBLEMS:
            row[problem] = entry.avalanche_problems.get(problem, 0)
        rows.append(row)
    return pd.DataFrame(rows)
