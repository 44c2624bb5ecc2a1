"""Color scale definitions for avalanche bulletin maps.

This module provides the color scales used across the map views:
- Intensity: ten-step yellow-red scale for the micro-region choropleth
- Marker: coarser four-step scale for marker/label presentations
- Pie charts: fixed palettes for danger levels and avalanche problems
- Countries: base colors for the aggregate-view country layer

Intensity is a count normalized to [0, 1] by the dataset-wide maximum for
the selected metric. A count of zero always maps to NO_DATA_COLOR.
"""

import math
from typing import Optional

# =============================================================================
# INTENSITY COLOR SCALES
# =============================================================================

# Sentinel for "no data": regions rendered with this color stay unstyled
NO_DATA_COLOR = "#ffffff"

# (min_intensity, max_intensity, hex_color), half-open [min, max) buckets.
# The top bucket also takes intensity == 1.
INTENSITY_SCALE = [
    (0.0, 0.1, "#ffffcc"),
    (0.1, 0.2, "#ffeda0"),
    (0.2, 0.3, "#fed976"),
    (0.3, 0.4, "#feb24c"),
    (0.4, 0.5, "#fd8d3c"),
    (0.5, 0.6, "#fc4e2a"),
    (0.6, 0.7, "#e31a1c"),
    (0.7, 0.8, "#bd0026"),
    (0.8, 0.9, "#800026"),
    (0.9, 1.0, "#4d0019"),
]

# (upper_threshold, hex_color), first threshold above the intensity wins
MARKER_SCALE = [
    (0.25, "#ffffb2"),
    (0.5, "#fecc5c"),
    (0.75, "#fd8d3c"),
    (float("inf"), "#e31a1c"),
]

SCALES = ("choropleth", "marker")


def compute_intensity(count: float, max_count: float) -> float:
    """Normalize a count by the metric maximum.

    Args:
        count: Observed count for one region
        max_count: Dataset-wide maximum for the same metric

    Returns:
        Intensity clamped to [0, 1]. When max_count <= 0 the intensity is 1
        for any positive count and 0 otherwise.

    Examples:
        >>> compute_intensity(5, 10)
        0.5
        >>> compute_intensity(3, 0)
        1.0
    """
    if max_count <= 0:
        return 1.0 if count > 0 else 0.0
    return min(max(count / max_count, 0.0), 1.0)


def intensity_to_hex(intensity: float) -> str:
    """Look up the choropleth bucket color for an intensity.

    Args:
        intensity: Normalized intensity, clamped to [0, 1]

    Returns:
        Hex color string of the bucket containing the intensity
    """
    intensity = min(max(intensity, 0.0), 1.0)

    for low, high, color in INTENSITY_SCALE:
        if low <= intensity < high:
            return color

    return INTENSITY_SCALE[-1][2]


def intensity_to_marker_hex(intensity: float) -> str:
    """Look up the marker scale color for an intensity."""
    for threshold, color in MARKER_SCALE:
        if intensity < threshold:
            return color

    return MARKER_SCALE[-1][1]


def color_for_count(count: float, max_count: float, scale: str = "choropleth") -> str:
    """Convert a region count to a hex color.

    Args:
        count: Observed count for one region
        max_count: Dataset-wide maximum for the same metric
        scale: "choropleth" (ten buckets) or "marker" (four buckets)

    Returns:
        Hex color string, NO_DATA_COLOR for zero or negative counts

    Raises:
        ValueError: If the scale name is unknown

    Examples:
        >>> color_for_count(0, 10)
        '#ffffff'
        >>> color_for_count(10, 10)
        '#4d0019'
        >>> color_for_count(1, 10, scale="marker")
        '#ffffb2'
    """
    if scale not in SCALES:
        raise ValueError(f"Unknown color scale: {scale}. Must be one of {SCALES}")

    if count <= 0:
        return NO_DATA_COLOR

    intensity = compute_intensity(count, max_count)
    if scale == "marker":
        return intensity_to_marker_hex(intensity)
    return intensity_to_hex(intensity)


# =============================================================================
# PIE CHART PALETTES
# =============================================================================

# Danger levels 1..5
DANGER_LEVEL_COLORS = [
    "#ccffcc",
    "#ffff00",
    "#ff9900",
    "#ff0000",
    "#9102ff",
]

# Triebschnee, Neuschnee, Nassschnee, Gleitschnee, Altschnee
AVALANCHE_PROBLEM_COLORS = [
    "#3366ff",
    "#ff9900",
    "#33cc33",
    "#ff3300",
    "#cc00cc",
]


# =============================================================================
# COUNTRY COLORS
# =============================================================================

COUNTRY_COLORS = {
    "AT": "#ff6b6b",  # Austria - red
    "CH": "#4ecdc4",  # Switzerland - teal
    "DE": "#ffe66d",  # Germany - yellow
    "IT": "#1a535c",  # Italy - dark teal
    "FR": "#7cb518",  # France - green
    "SI": "#f7b801",  # Slovenia - orange
    "LI": "#ff9f1c",  # Liechtenstein - amber
}

# (region prefix, relative shade shift) applied on top of the country color
COUNTRY_SHADE_SHIFTS = [
    ("AT-07", 0.4),
    ("AT-08", -0.4),
    ("AT-05", -0.6),
    ("IT-32-BZ", 0.4),
]


def shift_color(hex_color: str, percent: float) -> str:
    """Lighten or darken a color by scaling each channel.

    Args:
        hex_color: Hex color string (e.g., "#ff6b6b")
        percent: Relative change per channel, e.g. 0.4 for +40%

    Returns:
        Hex color string with channels clamped to 0-255

    Examples:
        >>> shift_color("#808080", 0.5)
        '#c0c0c0'
    """
    shifted = [
        int(round(min(255, max(0, channel + channel * percent))))
        for channel in hex_to_rgb(hex_color)
    ]
    return rgb_to_hex(*shifted)


def country_fill_color(region_id: Optional[str]) -> str:
    """Aggregate-view fill color for a micro-region id.

    Args:
        region_id: Micro-region id (e.g. "AT-07-14")

    Returns:
        Country color with the super-region shade shifts applied, or
        NO_DATA_COLOR for unknown countries
    """
    if not region_id:
        return NO_DATA_COLOR

    color = COUNTRY_COLORS.get(region_id[:2])
    if color is None:
        return NO_DATA_COLOR

    for prefix, percent in COUNTRY_SHADE_SHIFTS:
        if region_id.startswith(prefix):
            color = shift_color(color, percent)
    return color


# =============================================================================
# LEGEND RENDERING
# =============================================================================

def legend_entries(max_count: float) -> list[tuple[int, str]]:
    """Legend rows for the choropleth scale.

    Args:
        max_count: Maximum of the selected metric

    Returns:
        List of (lowest_count, hex_color) per bucket, lowest count first.
        Buckets no integer count can reach are left out.
    """
    if max_count <= 0:
        return [(1, INTENSITY_SCALE[-1][2])]

    entries = []
    for low, _, color in INTENSITY_SCALE:
        # Tolerance keeps float noise (0.3 * 10 = 3.0000000000000004) out of ceil
        count = max(1, math.ceil(low * max_count - 1e-9))
        if count > max_count:
            continue
        if color_for_count(count, max_count) != color:
            continue
        entries.append((count, color))
    return entries


def render_intensity_legend(max_count: float, container=None) -> None:
    """Render the choropleth color legend in Streamlit.

    Args:
        max_count: Maximum of the selected metric
        container: Streamlit container (st, st.sidebar, st.columns()[0], etc.)
                   If None, uses st directly.

    Example:
        >>> render_intensity_legend(42, st.sidebar)
    """
    import streamlit as st

    target = container if container is not None else st

    target.markdown("**Legende**")

    for count, color in legend_entries(max_count):
        target.markdown(
            f'<div style="display:flex;align-items:center;gap:8px;margin:2px 0;">'
            f'<span style="background:{color};width:16px;height:16px;display:inline-block;'
            f'border:1px solid #000;"></span>'
            f'<span style="font-size:12px;">{count}+</span>'
            f'</div>',
            unsafe_allow_html=True,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert hex color to RGB tuple.

    Args:
        hex_color: Hex color string (e.g., "#ffeda0")

    Returns:
        Tuple of (R, G, B) values (0-255)
    """
    hex_color = hex_color.lstrip("#")
    return (
        int(hex_color[0:2], 16),
        int(hex_color[2:4], 16),
        int(hex_color[4:6], 16),
    )


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB values to hex color string.

    Args:
        r: Red value (0-255)
        g: Green value (0-255)
        b: Blue value (0-255)

    Returns:
        Hex color string (e.g., "#ffeda0")
    """
    return f"#{r:02x}{g:02x}{b:02x}"
