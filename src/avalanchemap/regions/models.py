"""Data models for region statistics."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

# Value of the filter dropdown that selects the aggregate (pie chart) view
ALL_VALUE = "alle"

DANGER_LEVELS = ("1", "2", "3", "4", "5")

AVALANCHE_PROBLEMS = (
    "wind_drifted_snow",
    "persistent_weak_layers",
    "new_snow",
    "gliding_snow",
    "wet_snow",
)

# Display label -> problem key
PROBLEM_LABEL_TO_KEY = {
    "Triebschnee": "wind_drifted_snow",
    "Altschnee": "persistent_weak_layers",
    "Neuschnee": "new_snow",
    "Gleitschnee": "gliding_snow",
    "Nassschnee": "wet_snow",
}

PROBLEM_KEY_TO_LABEL = {key: label for label, key in PROBLEM_LABEL_TO_KEY.items()}


class FilterCategory(str, Enum):
    """Metric family selected in the filter controls."""

    DANGER_LEVEL = "Gefahrenstufe"
    AVALANCHE_PROBLEM = "Lawinenprobleme"


@dataclass(frozen=True)
class Filter:
    """Active map filter.

    Attributes:
        category: Metric family (danger levels or avalanche problems)
        value: "alle" for the aggregate view, otherwise a danger level
            ("1".."5") or an avalanche problem display label
    """

    category: FilterCategory = FilterCategory.DANGER_LEVEL
    value: str = ALL_VALUE

    def __post_init__(self):
        # Accept plain strings from UI controls and request bodies
        if not isinstance(self.category, FilterCategory):
            object.__setattr__(self, "category", FilterCategory(self.category))

    @property
    def is_aggregate(self) -> bool:
        """Whether the filter selects the aggregate view."""
        return self.value == ALL_VALUE

    def metric_key(self) -> Optional[str]:
        """Metric key selected by this filter.

        Returns:
            Danger level or avalanche problem key, or None for the aggregate
            view, unknown values and values from the other category.
        """
        if self.is_aggregate:
            return None
        if self.category is FilterCategory.DANGER_LEVEL:
            return self.value if self.value in DANGER_LEVELS else None
        return PROBLEM_LABEL_TO_KEY.get(self.value)


@dataclass(frozen=True)
class RegionSummary:
    """Bulletin statistics for one micro-region.

    Attributes:
        code: Region identifier (e.g. "AT-07-01")
        name: Region display name
        rating_counts: Danger level -> number of bulletins
        avalanche_problem_counts: Problem key -> number of bulletins
    """

    code: str
    name: str = ""
    rating_counts: Mapping[str, int] = field(default_factory=dict)
    avalanche_problem_counts: Mapping[str, int] = field(default_factory=dict)

    def count_for(self, category: FilterCategory, key: str) -> int:
        """Count for a metric key in the given category (0 when absent)."""
        if category is FilterCategory.DANGER_LEVEL:
            return self.rating_counts.get(key, 0)
        return self.avalanche_problem_counts.get(key, 0)

    def to_dict(self) -> dict:
        """Return as dictionary in the dataset's JSON shape."""
        return {
            "code": self.code,
            "name": self.name,
            "rating_counts": dict(self.rating_counts),
            "avalanche_problem_counts": dict(self.avalanche_problem_counts),
        }


class SuperRegion(Enum):
    """Fixed coarse groupings of micro-regions for the pie chart view.

    Each member carries the (lon, lat) anchor where its chart is placed.
    """

    CH = ("CH", (8.2275, 46.8182))  # Middle of Switzerland
    DE = ("DE", (11.3833, 47.6167))  # South of Bad Toelz
    AT_07 = ("AT-07", (11.4, 47.2683))  # Innsbruck
    AT_08 = ("AT-08", (9.8167, 47.1667))  # Bludenz
    AT_05 = ("AT-05", (12.8, 47.3167))  # Zell am See
    AT_OTHER = ("AT-other", (15.45, 47.0667))  # Graz
    IT_32_BZ = ("IT-32-BZ", (11.35, 46.5))  # Bozen
    IT_OTHER = ("IT-other", (10.8333, 46.0833))  # North of Lake Garda

    def __init__(self, code: str, anchor: tuple[float, float]):
        self.code = code
        self.anchor = anchor

    @property
    def lon(self) -> float:
        return self.anchor[0]

    @property
    def lat(self) -> float:
        return self.anchor[1]

    @classmethod
    def from_code(cls, code: str) -> "SuperRegion":
        """Look up a super-region by its code (e.g. "AT-07").

        Raises:
            ValueError: If the code is not a known super-region
        """
        for member in cls:
            if member.code == code:
                return member
        raise ValueError(f"Unknown super-region: {code}")


# Micro-region id prefixes shown on the map
CONSIDERED_PREFIXES = ("AT", "CH", "DE", "IT-2", "IT-3", "IT-5")
