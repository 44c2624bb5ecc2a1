"""Style resolution for micro-region polygons.

The tile renderer calls ``resolve_style`` once per rendered feature, on every
filter change and tile load, so the resolver is total: any id, layer or date
combination yields a Style and never raises.

Resolution order:
    1. outline layer -> stroke only
    2. other layers, non-current polygons, regions outside the map -> suppressed
    3. region missing from the dataset -> neutral default
    4. aggregate filter ("alle") -> neutral default
    5. unknown filter value -> neutral default
    6. zero count -> suppressed (base map shows through)
    7. otherwise -> fill from the intensity color scale
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Union

from avalanchemap.regions.maxima import max_for
from avalanchemap.regions.models import CONSIDERED_PREFIXES, Filter, RegionSummary
from avalanchemap.regions.validity import FeatureLayer, FeatureProperties, is_current
from avalanchemap.visualization.colors import (
    NO_DATA_COLOR,
    color_for_count,
    country_fill_color,
)

logger = logging.getLogger(__name__)

STROKE_COLOR = "#000000"
OUTLINE_STROKE_WIDTH = 2
REGION_STROKE_WIDTH = 1
DEFAULT_FILL_OPACITY = 0.1


class StyleKind(Enum):
    """What the renderer should draw for a feature."""

    OUTLINE = "outline"
    FILL = "fill"
    DEFAULT = "default"
    SUPPRESSED = "suppressed"


@dataclass(frozen=True)
class Style:
    """Resolved style for one feature.

    Attributes:
        kind: Style category
        fill_color: Hex fill color, None for no fill
        fill_opacity: Fill opacity 0-1
        stroke_color: Hex stroke color, None for no stroke
        stroke_width: Stroke width in pixels
        label: Optional "{count}/{max}" text for marker presentations
    """

    kind: StyleKind
    fill_color: Optional[str] = None
    fill_opacity: float = 0.0
    stroke_color: Optional[str] = None
    stroke_width: float = 0.0
    label: Optional[str] = None

    @property
    def is_suppressed(self) -> bool:
        return self.kind is StyleKind.SUPPRESSED

    def to_dict(self) -> dict:
        """Return as dictionary."""
        return {
            "kind": self.kind.value,
            "fill_color": self.fill_color,
            "fill_opacity": self.fill_opacity,
            "stroke_color": self.stroke_color,
            "stroke_width": self.stroke_width,
            "label": self.label,
        }


SUPPRESSED = Style(kind=StyleKind.SUPPRESSED)

OUTLINE_STYLE = Style(
    kind=StyleKind.OUTLINE,
    stroke_color=STROKE_COLOR,
    stroke_width=OUTLINE_STROKE_WIDTH,
)

DEFAULT_STYLE = Style(
    kind=StyleKind.DEFAULT,
    fill_color=NO_DATA_COLOR,
    fill_opacity=DEFAULT_FILL_OPACITY,
    stroke_color=STROKE_COLOR,
    stroke_width=REGION_STROKE_WIDTH,
)


def is_considered_region(region_id: Optional[str]) -> bool:
    """Whether a micro-region id belongs to the countries shown on the map."""
    return isinstance(region_id, str) and region_id.startswith(CONSIDERED_PREFIXES)


def _visible_micro_region(feature: FeatureProperties, today: Union[str, date, None]) -> bool:
    return (
        feature.layer is FeatureLayer.MICRO_REGIONS
        and is_current(feature, today)
        and is_considered_region(feature.id)
    )


def resolve_style(
    feature: Union[FeatureProperties, Mapping[str, Any]],
    region_filter: Filter,
    summaries: Optional[Mapping[str, RegionSummary]],
    maxima: Optional[Mapping[str, int]],
    today: Union[str, date, None] = None,
    scale: str = "choropleth",
) -> Style:
    """Resolve the choropleth style of one feature.

    Args:
        feature: Feature properties (validated or raw tile properties)
        region_filter: Active filter
        summaries: Region code -> RegionSummary (None when no dataset loaded)
        maxima: Metric key -> dataset maximum
        today: Reference date for polygon validity, defaults to today
        scale: Color scale for the fill, "choropleth" or "marker"

    Returns:
        Style for the feature, SUPPRESSED when nothing should be drawn

    Example:
        >>> from avalanchemap.regions import Filter, FilterCategory, RegionSummaryStore
        >>> store = RegionSummaryStore.from_records([
        ...     {"code": "AT-07-01", "name": "Allgäuer Alpen Ost",
        ...      "rating_counts": {"3": 4}, "avalanche_problem_counts": {}},
        ... ])
        >>> style = resolve_style(
        ...     {"id": "AT-07-01", "layer": "micro-regions"},
        ...     Filter(FilterCategory.DANGER_LEVEL, "3"),
        ...     store,
        ...     {"3": 8},
        ... )
        >>> style.label
        '4/8'
    """
    feature = FeatureProperties.from_raw(feature)

    if feature.layer is FeatureLayer.OUTLINE:
        return OUTLINE_STYLE

    if not _visible_micro_region(feature, today):
        return SUPPRESSED

    summary = summaries.get(feature.id) if summaries else None
    if summary is None:
        return DEFAULT_STYLE

    if region_filter.is_aggregate:
        return DEFAULT_STYLE

    key = region_filter.metric_key()
    if key is None:
        logger.debug(f"No metric for filter {region_filter}, using default style")
        return DEFAULT_STYLE

    count = summary.count_for(region_filter.category, key)
    if count <= 0:
        return SUPPRESSED

    max_count = max_for(maxima, key)
    return Style(
        kind=StyleKind.FILL,
        fill_color=color_for_count(count, max_count, scale),
        fill_opacity=1.0,
        stroke_color=STROKE_COLOR,
        stroke_width=REGION_STROKE_WIDTH,
        label=f"{count}/{max_count}",
    )


def resolve_country_style(
    feature: Union[FeatureProperties, Mapping[str, Any]],
    today: Union[str, date, None] = None,
) -> Style:
    """Resolve the aggregate-view style of one feature.

    Colors current micro-regions by country, with lighter or darker shades
    for the separately charted super-regions, as backdrop for the pie charts.

    Args:
        feature: Feature properties (validated or raw tile properties)
        today: Reference date for polygon validity, defaults to today

    Returns:
        Style for the feature, SUPPRESSED when nothing should be drawn
    """
    feature = FeatureProperties.from_raw(feature)

    if feature.layer is FeatureLayer.OUTLINE:
        return OUTLINE_STYLE

    if not _visible_micro_region(feature, today):
        return SUPPRESSED

    return Style(
        kind=StyleKind.FILL,
        fill_color=country_fill_color(feature.id),
        fill_opacity=1.0,
        stroke_color=STROKE_COLOR,
        stroke_width=REGION_STROKE_WIDTH,
    )
