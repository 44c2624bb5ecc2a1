"""Region statistics engine for the avalanche map.

Validates, aggregates and styles per-region avalanche bulletin counts.

A dataset summary can be printed via:
    python -m avalanchemap.regions.report --category Gefahrenstufe --value 3
"""

from avalanchemap.regions.aggregation import (
    SuperRegionTotals,
    aggregate,
    classify_super_region,
    pie_chart_data,
    totals_to_dataframe,
)
from avalanchemap.regions.fetch import (
    fetch_region_summaries,
    load_region_summaries,
    read_region_summaries,
)
from avalanchemap.regions.maxima import compute_maxima, max_for
from avalanchemap.regions.models import (
    ALL_VALUE,
    AVALANCHE_PROBLEMS,
    DANGER_LEVELS,
    PROBLEM_KEY_TO_LABEL,
    PROBLEM_LABEL_TO_KEY,
    Filter,
    FilterCategory,
    RegionSummary,
    SuperRegion,
)
from avalanchemap.regions.session import (
    DatasetSnapshot,
    FeatureCenterCache,
    MapSession,
    RegionLabel,
)
from avalanchemap.regions.store import RegionSummaryStore
from avalanchemap.regions.styles import (
    DEFAULT_STYLE,
    SUPPRESSED,
    Style,
    StyleKind,
    resolve_country_style,
    resolve_style,
)
from avalanchemap.regions.validity import FeatureLayer, FeatureProperties, is_current

__all__ = [
    "ALL_VALUE",
    "AVALANCHE_PROBLEMS",
    "DANGER_LEVELS",
    "DEFAULT_STYLE",
    "DatasetSnapshot",
    "FeatureCenterCache",
    "RegionLabel",
    "FeatureLayer",
    "FeatureProperties",
    "Filter",
    "FilterCategory",
    "MapSession",
    "PROBLEM_KEY_TO_LABEL",
    "PROBLEM_LABEL_TO_KEY",
    "RegionSummary",
    "RegionSummaryStore",
    "SUPPRESSED",
    "Style",
    "StyleKind",
    "SuperRegion",
    "SuperRegionTotals",
    "aggregate",
    "classify_super_region",
    "compute_maxima",
    "fetch_region_summaries",
    "is_current",
    "load_region_summaries",
    "max_for",
    "pie_chart_data",
    "read_region_summaries",
    "resolve_country_style",
    "resolve_style",
    "totals_to_dataframe",
]
