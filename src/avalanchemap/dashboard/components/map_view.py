"""Avalanche map component for the dashboard.

Provides a PyDeck map with the micro-region outlines from the EAWS vector
tiles and, in the aggregate view, one marker per super-region placed at its
chart anchor. The pie charts themselves are rendered next to the map with
Streamlit's Vega-Lite support.

Example usage:
    >>> from avalanchemap.dashboard.components import render_avalanche_map
    >>> deck = render_avalanche_map(session.snapshot, session.filter)
    >>> st.pydeck_chart(deck)
"""

from typing import Mapping, Optional

import pandas as pd
import pydeck as pdk
import streamlit as st

from avalanchemap.regions.aggregation import SuperRegionTotals, pie_chart_data
from avalanchemap.regions.fetch import EAWS_TILE_URL
from avalanchemap.regions.models import Filter, FilterCategory, SuperRegion
from avalanchemap.regions.report import region_styles_frame
from avalanchemap.regions.session import DatasetSnapshot
from avalanchemap.utils.geo import DEFAULT_CENTER, DEFAULT_ZOOM
from avalanchemap.visualization.colors import NO_DATA_COLOR, hex_to_rgb

MAP_STYLE = "https://basemaps.cartocdn.com/gl/positron-gl-style/style.json"


def create_base_view(
    center_lat: float = None,
    center_lon: float = None,
    zoom: float = None,
) -> pdk.ViewState:
    """Create map view, optionally centered on a specific point.

    Args:
        center_lat: Latitude to center on (default: Alps overview)
        center_lon: Longitude to center on (default: Alps overview)
        zoom: Zoom level (default: 6 for overview, 9 for a point)

    Returns:
        PyDeck ViewState
    """
    if center_lat is not None and center_lon is not None:
        return pdk.ViewState(
            latitude=center_lat,
            longitude=center_lon,
            zoom=zoom if zoom is not None else 9,
            pitch=0,
        )

    lon, lat = DEFAULT_CENTER
    return pdk.ViewState(
        latitude=lat,
        longitude=lon,
        zoom=zoom if zoom is not None else DEFAULT_ZOOM,
        pitch=0,
    )


def create_outline_layer() -> pdk.Layer:
    """Create MVTLayer drawing the micro-region borders.

    Returns:
        PyDeck MVTLayer with black strokes and no fill
    """
    return pdk.Layer(
        "MVTLayer",
        data=EAWS_TILE_URL,
        filled=False,
        stroked=True,
        get_line_color=[0, 0, 0, 160],
        line_width_min_pixels=1,
        pickable=False,
    )


def super_region_frame(
    totals: Mapping[SuperRegion, SuperRegionTotals],
    category: FilterCategory,
) -> pd.DataFrame:
    """One row per super-region with its dominant slice.

    Args:
        totals: Super-region totals of the current snapshot
        category: Metric family shown in the pie charts

    Returns:
        DataFrame with columns code, lon, lat, region_count, total,
        dominant, color (RGBA list)
    """
    rows = []
    for super_region in SuperRegion:
        entry = totals.get(super_region) or SuperRegionTotals(super_region)
        pie = pie_chart_data(entry, category)
        total = sum(pie["values"])

        if total > 0:
            index = max(range(len(pie["values"])), key=lambda i: pie["values"][i])
            dominant = pie["labels"][index]
            color = [*hex_to_rgb(pie["colors"][index]), 200]
        else:
            dominant = "-"
            color = [*hex_to_rgb(NO_DATA_COLOR), 0]

        rows.append({
            "code": super_region.code,
            "lon": super_region.lon,
            "lat": super_region.lat,
            "region_count": entry.region_count,
            "total": total,
            "dominant": dominant,
            "color": color,
        })

    return pd.DataFrame(
        rows,
        columns=["code", "lon", "lat", "region_count", "total", "dominant", "color"],
    )


def create_super_region_layer(frame: pd.DataFrame) -> pdk.Layer:
    """Create ScatterplotLayer with one marker per super-region.

    Args:
        frame: Result of super_region_frame()

    Returns:
        PyDeck ScatterplotLayer colored by the dominant slice
    """
    return pdk.Layer(
        "ScatterplotLayer",
        data=frame,
        get_position=["lon", "lat"],
        get_fill_color="color",
        get_line_color=[0, 0, 0],
        get_radius=15000,
        radius_min_pixels=10,
        radius_max_pixels=40,
        stroked=True,
        pickable=True,
    )


def render_avalanche_map(
    snapshot: DatasetSnapshot,
    region_filter: Filter,
    center_lat: float = None,
    center_lon: float = None,
    zoom: float = None,
) -> pdk.Deck:
    """Render the avalanche map.

    Args:
        snapshot: Current dataset snapshot
        region_filter: Active filter
        center_lat: Optional latitude to center map on
        center_lon: Optional longitude to center map on
        zoom: Optional zoom level

    Returns:
        PyDeck Deck object ready for display with st.pydeck_chart()
    """
    layers = [create_outline_layer()]
    tooltip = None

    if region_filter.is_aggregate:
        frame = super_region_frame(snapshot.super_regions, region_filter.category)
        layers.append(create_super_region_layer(frame))
        tooltip = {
            "html": """
                <b>{code}</b><br/>
                Regionen: {region_count}<br/>
                Summe: {total}<br/>
                Häufigster Wert: {dominant}
            """,
            "style": {
                "backgroundColor": "#1a1a2e",
                "color": "white",
                "padding": "8px",
                "borderRadius": "4px",
            },
        }

    return pdk.Deck(
        layers=layers,
        initial_view_state=create_base_view(center_lat, center_lon, zoom),
        tooltip=tooltip,
        map_style=MAP_STYLE,
    )


def pie_chart_spec(pie: dict) -> dict:
    """Vega-Lite spec for one super-region pie chart.

    Args:
        pie: Result of pie_chart_data()

    Returns:
        Vega-Lite specification with inline data and a fixed color range
    """
    return {
        "data": {
            "values": [
                {"label": label, "value": value}
                for label, value in zip(pie["labels"], pie["values"])
            ]
        },
        "mark": {"type": "arc", "stroke": "#000000", "strokeWidth": 0.5},
        "encoding": {
            "theta": {"field": "value", "type": "quantitative"},
            "color": {
                "field": "label",
                "type": "nominal",
                "sort": pie["labels"],
                "scale": {"domain": pie["labels"], "range": pie["colors"]},
                "legend": None,
            },
            "tooltip": [
                {"field": "label", "type": "nominal"},
                {"field": "value", "type": "quantitative"},
            ],
        },
        "width": 120,
        "height": 120,
    }


def render_pie_charts(
    totals: Mapping[SuperRegion, SuperRegionTotals],
    category: FilterCategory,
    columns: int = 4,
    container=None,
) -> None:
    """Render one pie chart per super-region in a grid.

    Args:
        totals: Super-region totals of the current snapshot
        category: Metric family to chart
        columns: Charts per row
        container: Streamlit container, st if None
    """
    target = container if container is not None else st
    super_regions = list(SuperRegion)

    for start in range(0, len(super_regions), columns):
        cols = target.columns(columns)
        for col, super_region in zip(cols, super_regions[start:start + columns]):
            entry = totals.get(super_region) or SuperRegionTotals(super_region)
            pie = pie_chart_data(entry, category)
            with col:
                st.markdown(f"**{super_region.code}**")
                if sum(pie["values"]) > 0:
                    st.vega_lite_chart(pie_chart_spec(pie))
                else:
                    st.caption("Keine Daten")


def render_region_table(
    snapshot: DatasetSnapshot,
    region_filter: Filter,
    today: Optional[str] = None,
    container=None,
) -> pd.DataFrame:
    """Render the resolved style of every region as a table.

    Suppressed regions (count zero) are left out.

    Returns:
        The displayed DataFrame
    """
    target = container if container is not None else st

    frame = region_styles_frame(snapshot, region_filter, today)
    frame = frame[frame["kind"] == "fill"]
    display_df = frame[["code", "name", "label", "fill_color"]].copy()
    display_df.columns = ["Region", "Name", "Anzahl", "Farbe"]

    target.dataframe(display_df, use_container_width=True, hide_index=True)
    return display_df
