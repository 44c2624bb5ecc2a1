"""Tests for geographic utilities."""

import pytest

from avalanchemap.utils.geo import DEFAULT_CENTER, DEFAULT_ZOOM, extent_center


class TestExtentCenter:
    """Tests for extent_center function."""

    def test_center_of_extent(self):
        """Should return the midpoint of [min_x, min_y, max_x, max_y]."""
        assert extent_center([10.0, 46.0, 12.0, 48.0]) == (11.0, 47.0)

    def test_accepts_numeric_strings(self):
        """Values are converted to float."""
        assert extent_center(["0", "0", "2", "4"]) == (1.0, 2.0)

    def test_wrong_length(self):
        """Should raise ValueError unless exactly four values are given."""
        with pytest.raises(ValueError, match="4 values"):
            extent_center([1.0, 2.0, 3.0])


class TestMapDefaults:
    """Tests for map default constants."""

    def test_default_view_over_the_alps(self):
        """Default map center should lie over the eastern Alps."""
        lon, lat = DEFAULT_CENTER
        assert 5.5 <= lon <= 17.5
        assert 43.5 <= lat <= 48.5
        assert DEFAULT_ZOOM == 6
