"""Visualization utilities for the avalanche map.

This module provides shared color scales and legend components
used across all visual components (maps, charts, tables).
"""

from .colors import (
    # Pie chart palettes
    AVALANCHE_PROBLEM_COLORS,
    # Country layer
    COUNTRY_COLORS,
    DANGER_LEVEL_COLORS,
    # Intensity scales
    INTENSITY_SCALE,
    MARKER_SCALE,
    NO_DATA_COLOR,
    color_for_count,
    compute_intensity,
    country_fill_color,
    hex_to_rgb,
    # Legends
    legend_entries,
    render_intensity_legend,
    rgb_to_hex,
    shift_color,
)

__all__ = [
    "INTENSITY_SCALE",
    "MARKER_SCALE",
    "NO_DATA_COLOR",
    "compute_intensity",
    "color_for_count",
    "DANGER_LEVEL_COLORS",
    "AVALANCHE_PROBLEM_COLORS",
    "COUNTRY_COLORS",
    "country_fill_color",
    "shift_color",
    "legend_entries",
    "render_intensity_legend",
    "hex_to_rgb",
    "rgb_to_hex",
]
