"""Feature validity filter for micro-region polygons.

Region polygons in the tile source carry optional ``start_date`` and
``end_date`` properties; a polygon is current when ``today`` falls into
``[start_date, end_date)``. Dates are ISO ``YYYY-MM-DD`` strings, which
compare correctly as plain strings.
"""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Union

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class FeatureLayer(Enum):
    """Known layers of the micro-region tile source."""

    OUTLINE = "outline"
    MICRO_REGIONS = "micro-regions"
    MICRO_REGIONS_ELEVATION = "micro-regions_elevation"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "FeatureLayer":
        """Map a raw layer name to a layer, unknown names to OTHER."""
        for member in cls:
            if member is not cls.OTHER and member.value == value:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class FeatureProperties:
    """Validated properties of one rendered polygon.

    Attributes:
        id: Region id, None when missing or not a string
        layer: Tile layer the polygon belongs to
        start_date: First day the polygon is valid (inclusive)
        end_date: First day the polygon is no longer valid (exclusive)
        malformed: True when a date property was present but unparseable
    """

    id: Optional[str]
    layer: FeatureLayer
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    malformed: bool = False

    @classmethod
    def from_raw(cls, properties: Optional[Mapping[str, Any]]) -> "FeatureProperties":
        """Build from an untyped property mapping supplied by a tile renderer.

        Never raises: unknown layers become ``FeatureLayer.OTHER``, non-string
        ids become None and bad dates set ``malformed``.
        """
        if isinstance(properties, FeatureProperties):
            return properties
        if not isinstance(properties, Mapping):
            return cls(id=None, layer=FeatureLayer.OTHER, malformed=True)

        raw_id = properties.get("id")
        start, start_ok = _parse_date(properties.get("start_date"))
        end, end_ok = _parse_date(properties.get("end_date"))

        return cls(
            id=raw_id if isinstance(raw_id, str) else None,
            layer=FeatureLayer.parse(properties.get("layer")),
            start_date=start,
            end_date=end,
            malformed=not (start_ok and end_ok),
        )


def _parse_date(value: Any) -> tuple[Optional[str], bool]:
    """Normalize a date property to (iso_string_or_None, ok)."""
    if value is None or value == "":
        return None, True
    if isinstance(value, date):
        return value.isoformat()[:10], True
    if isinstance(value, str):
        # Accept full timestamps, compare on the date part only
        candidate = value[:10]
        if _ISO_DATE.match(candidate):
            return candidate, True
    return None, False


def today_iso() -> str:
    """Current local date as ``YYYY-MM-DD``."""
    return date.today().isoformat()


def normalize_today(today: Union[str, date, None]) -> str:
    """Normalize a reference date argument to an ISO string."""
    if today is None:
        return today_iso()
    if isinstance(today, date):
        return today.isoformat()[:10]
    return str(today)[:10]


def is_current(
    properties: Union[FeatureProperties, Mapping[str, Any]],
    today: Union[str, date, None] = None,
) -> bool:
    """Check whether a polygon is valid on ``today``.

    Args:
        properties: Feature properties (validated or raw mapping)
        today: Reference date, defaults to the current date

    Returns:
        True iff start_date is absent or <= today, and end_date is absent
        or > today. Features with malformed dates are never current.

    Examples:
        >>> is_current({"start_date": "2024-01-01", "end_date": "2024-06-01"}, "2024-03-01")
        True
        >>> is_current({"start_date": "2024-01-01", "end_date": "2024-06-01"}, "2024-06-01")
        False
    """
    feature = FeatureProperties.from_raw(properties)
    if feature.malformed:
        return False

    ref = normalize_today(today)
    return (
        (feature.start_date is None or feature.start_date <= ref)
        and (feature.end_date is None or feature.end_date > ref)
    )
