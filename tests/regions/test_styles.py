"""Tests for feature style resolution."""

import pytest

from avalanchemap.regions.maxima import compute_maxima
from avalanchemap.regions.models import Filter, FilterCategory
from avalanchemap.regions.store import RegionSummaryStore
from avalanchemap.regions.styles import (
    DEFAULT_STYLE,
    OUTLINE_STYLE,
    SUPPRESSED,
    StyleKind,
    is_considered_region,
    resolve_country_style,
    resolve_style,
)

TODAY = "2025-01-15"

DANGER_3 = Filter(FilterCategory.DANGER_LEVEL, "3")


@pytest.fixture
def maxima(sample_store):
    return compute_maxima(sample_store)


def region(code, **extra):
    """Properties of a current micro-region polygon."""
    return {"id": code, "layer": "micro-regions", **extra}


class TestResolveStyle:
    """Tests for resolve_style resolution order."""

    def test_single_region_dataset(self):
        """A one-region store with explicit maxima gives a count label."""
        store = RegionSummaryStore.from_records([
            {
                "code": "AT-07-01",
                "name": "Allgäuer Alpen Ost",
                "rating_counts": {"3": 4},
                "avalanche_problem_counts": {},
            },
        ])
        style = resolve_style(region("AT-07-01"), DANGER_3, store, {"3": 8}, TODAY)
        assert style.kind is StyleKind.FILL
        assert style.label == "4/8"

    def test_outline(self, sample_store, maxima):
        """Outline features are stroke only."""
        style = resolve_style({"id": "AT-07", "layer": "outline"}, DANGER_3, sample_store, maxima, TODAY)
        assert style == OUTLINE_STYLE
        assert style.kind is StyleKind.OUTLINE
        assert style.fill_color is None
        assert style.stroke_width == 2

    def test_other_layers_suppressed(self, sample_store, maxima):
        """Layers other than micro-regions and outline draw nothing."""
        for layer in ("micro-regions_elevation", "roads", None):
            style = resolve_style({"id": "AT-07-01", "layer": layer}, DANGER_3, sample_store, maxima, TODAY)
            assert style is SUPPRESSED

    def test_non_current_suppressed(self, sample_store, maxima):
        """Polygons outside their validity window draw nothing."""
        expired = region("AT-07-01", start_date="2020-01-01", end_date="2021-01-01")
        assert resolve_style(expired, DANGER_3, sample_store, maxima, TODAY).is_suppressed

    def test_malformed_dates_suppressed(self, sample_store, maxima):
        """Malformed validity dates draw nothing."""
        broken = region("AT-07-01", start_date="soon")
        assert resolve_style(broken, DANGER_3, sample_store, maxima, TODAY).is_suppressed

    def test_unconsidered_country_suppressed(self, sample_store, maxima):
        """Regions outside the mapped countries draw nothing."""
        assert resolve_style(region("FR-01"), DANGER_3, sample_store, maxima, TODAY).is_suppressed
        assert resolve_style(region("IT-41-01"), DANGER_3, sample_store, maxima, TODAY).is_suppressed

    def test_missing_region_default(self, sample_store, maxima):
        """Regions not in the dataset get the neutral default."""
        assert resolve_style(region("AT-99-99"), DANGER_3, sample_store, maxima, TODAY) == DEFAULT_STYLE

    def test_no_dataset_default(self):
        """Before a dataset loads every region gets the neutral default."""
        assert resolve_style(region("AT-07-01"), DANGER_3, None, None, TODAY) == DEFAULT_STYLE

    def test_aggregate_filter_default(self, sample_store, maxima):
        """The 'alle' filter gives the neutral default."""
        style = resolve_style(region("AT-07-01"), Filter(), sample_store, maxima, TODAY)
        assert style == DEFAULT_STYLE
        assert style.fill_color == "#ffffff"
        assert style.fill_opacity == 0.1

    @pytest.mark.parametrize("region_filter", [
        Filter(FilterCategory.DANGER_LEVEL, "7"),
        Filter(FilterCategory.AVALANCHE_PROBLEM, "Schneebrett"),
        Filter(FilterCategory.DANGER_LEVEL, "Altschnee"),
        Filter(FilterCategory.AVALANCHE_PROBLEM, "3"),
    ])
    def test_unknown_value_default(self, sample_store, maxima, region_filter):
        """Values unknown to their category give the neutral default."""
        assert resolve_style(region("AT-07-01"), region_filter, sample_store, maxima, TODAY) == DEFAULT_STYLE

    def test_zero_count_suppressed(self, sample_store, maxima):
        """Regions with a zero count draw nothing."""
        assert resolve_style(region("AT-08-01"), DANGER_3, sample_store, maxima, TODAY).is_suppressed

    def test_fill_at_max(self, sample_store, maxima):
        """The region holding the maximum gets the darkest fill."""
        style = resolve_style(region("AT-07-02"), DANGER_3, sample_store, maxima, TODAY)
        assert style.kind is StyleKind.FILL
        assert style.fill_color == "#4d0019"
        assert style.fill_opacity == 1.0
        assert style.stroke_color == "#000000"
        assert style.label == "9/9"

    def test_fill_intensity(self, sample_store, maxima):
        """Fills are normalized by the dataset maximum."""
        style = resolve_style(region("AT-07-01"), DANGER_3, sample_store, maxima, TODAY)
        assert style.fill_color == "#fc4e2a"  # 5/9
        assert style.label == "5/9"

    def test_avalanche_problem(self, sample_store, maxima):
        """Problem labels are mapped to their keys."""
        region_filter = Filter(FilterCategory.AVALANCHE_PROBLEM, "Altschnee")
        style = resolve_style(region("IT-32-BZ-01"), region_filter, sample_store, maxima, TODAY)
        assert style.fill_color == "#4d0019"
        assert style.label == "7/7"

    def test_marker_scale(self, sample_store, maxima):
        """The marker scale can be selected."""
        style = resolve_style(region("AT-07-01"), DANGER_3, sample_store, maxima, TODAY, scale="marker")
        assert style.fill_color == "#fd8d3c"

    def test_never_raises(self, sample_store, maxima):
        """Garbage properties resolve to a style."""
        for garbage in (None, {}, {"id": 5, "layer": 5}, {"id": "AT-07-01", "layer": "micro-regions", "end_date": []}):
            assert resolve_style(garbage, DANGER_3, sample_store, maxima, TODAY).is_suppressed

    def test_filter_accepts_strings(self, sample_store, maxima):
        """Filters built from plain strings behave like enum filters."""
        region_filter = Filter("Gefahrenstufe", "3")
        style = resolve_style(region("AT-07-02"), region_filter, sample_store, maxima, TODAY)
        assert style.kind is StyleKind.FILL


class TestResolveCountryStyle:
    """Tests for the aggregate-view country style."""

    def test_country_fill(self):
        """Current micro-regions are filled with their country color."""
        style = resolve_country_style(region("CH-1111"), TODAY)
        assert style.kind is StyleKind.FILL
        assert style.fill_color == "#4ecdc4"

    def test_outline(self):
        """Outlines stay stroke only."""
        assert resolve_country_style({"id": "AT", "layer": "outline"}, TODAY) == OUTLINE_STYLE

    def test_unconsidered_suppressed(self):
        """Regions outside the mapped countries draw nothing."""
        assert resolve_country_style(region("FR-01"), TODAY).is_suppressed


class TestIsConsideredRegion:
    """Tests for is_considered_region."""

    @pytest.mark.parametrize("code,expected", [
        ("AT-07-01", True),
        ("CH-1111", True),
        ("DE-BY-11", True),
        ("IT-23-AO-01", True),
        ("IT-32-BZ-01", True),
        ("IT-57-01", True),
        ("IT-21-01", True),
        ("IT-41-01", False),
        ("FR-01", False),
        (None, False),
    ])
    def test_prefixes(self, code, expected):
        assert is_considered_region(code) is expected


class TestStyleToDict:
    """Tests for Style.to_dict."""

    def test_round_trip_fields(self):
        """Dictionary should carry every style field."""
        assert DEFAULT_STYLE.to_dict() == {
            "kind": "default",
            "fill_color": "#ffffff",
            "fill_opacity": 0.1,
            "stroke_color": "#000000",
            "stroke_width": 1,
            "label": None,
        }
