"""Dashboard UI components for the avalanche map.

This module provides reusable Streamlit components:

- Map: render_avalanche_map, create_outline_layer, create_super_region_layer, create_base_view
- Aggregate view: super_region_frame, pie_chart_spec, render_pie_charts
- Region view: render_region_table
- Filter: CATEGORY_OPTIONS, value_options, render_filter_controls
"""

from avalanchemap.dashboard.components.filter_controls import (
    CATEGORY_OPTIONS,
    format_value,
    render_filter_controls,
    value_options,
)
from avalanchemap.dashboard.components.map_view import (
    create_base_view,
    create_outline_layer,
    create_super_region_layer,
    pie_chart_spec,
    render_avalanche_map,
    render_pie_charts,
    render_region_table,
    super_region_frame,
)

__all__ = [
    # Map
    "create_base_view",
    "create_outline_layer",
    "create_super_region_layer",
    "render_avalanche_map",
    # Aggregate view
    "super_region_frame",
    "pie_chart_spec",
    "render_pie_charts",
    # Region view
    "render_region_table",
    # Filter
    "CATEGORY_OPTIONS",
    "format_value",
    "render_filter_controls",
    "value_options",
]
