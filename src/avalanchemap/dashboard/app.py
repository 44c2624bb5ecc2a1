"""Streamlit dashboard for the avalanche bulletin map.

Shows per-region bulletin statistics: a choropleth table for one danger
level or avalanche problem, or pie charts per super-region for "alle".
Run with: streamlit run src/avalanchemap/dashboard/app.py
"""

import logging
import sys
from pathlib import Path

# Add src directory to path for Streamlit Cloud compatibility
_app_file = Path(__file__).resolve()
_src_path = _app_file.parent.parent.parent
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

from datetime import date, datetime

import streamlit as st

from avalanchemap.dashboard.components import (
    render_avalanche_map,
    render_filter_controls,
    render_pie_charts,
    render_region_table,
)
from avalanchemap.regions.fetch import DEFAULT_SUMMARY_SOURCE, load_region_summaries
from avalanchemap.regions.maxima import max_for
from avalanchemap.regions.session import MapSession
from avalanchemap.visualization.colors import render_intensity_legend

SESSION_KEY = "map_session"

# Page configuration
st.set_page_config(
    page_title="Lawinenbulletin Statistik",
    page_icon="🏔️",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_data(ttl=1800, max_entries=2, show_spinner="Loading region statistics...")
def fetch_dataset(source: str):
    """Load the region summary payload (cached 30 min)."""
    return load_region_summaries(source)


def get_session() -> MapSession:
    """Get the map session of this browser tab, loading the dataset once."""
    session = st.session_state.get(SESSION_KEY)
    if session is None:
        session = MapSession()
        session.refresh(lambda: fetch_dataset(DEFAULT_SUMMARY_SOURCE))
        st.session_state[SESSION_KEY] = session
    return session


def create_sidebar(session: MapSession) -> date:
    """Create sidebar with filter controls, legend and data info.

    Returns:
        Reference date for polygon validity
    """
    st.sidebar.header("Filter")
    session.set_filter(render_filter_controls(st.sidebar))

    today = st.sidebar.date_input("Stichtag", value=date.today())

    key = session.filter.metric_key()
    if key is not None:
        st.sidebar.markdown("---")
        render_intensity_legend(max_for(session.snapshot.maxima, key), st.sidebar)

    snapshot = session.snapshot
    st.sidebar.markdown("---")
    st.sidebar.markdown("**Daten**")
    st.sidebar.markdown(f"- Regionen: {len(snapshot.store)}")
    if snapshot.loaded_at is not None:
        st.sidebar.markdown(f"- Geladen: {snapshot.loaded_at.strftime('%Y-%m-%d %H:%M')}")
    if session.refresh_state.last_error:
        st.sidebar.warning(f"Letzte Aktualisierung fehlgeschlagen: {session.refresh_state.last_error}")

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Daten neu laden"):
        fetch_dataset.clear()
        session.refresh(lambda: fetch_dataset(DEFAULT_SUMMARY_SOURCE))
        st.rerun()

    return today


def main():
    """Main dashboard function."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    st.title("🏔️ Lawinenbulletin Statistik")
    st.markdown("Häufigkeit von Gefahrenstufen und Lawinenproblemen je Mikroregion")

    session = get_session()
    today = create_sidebar(session)
    snapshot = session.snapshot
    region_filter = session.filter

    if not snapshot.is_loaded:
        st.warning("Keine Daten geladen. Bitte später erneut versuchen.")

    deck = render_avalanche_map(snapshot, region_filter)
    st.pydeck_chart(deck, use_container_width=True)

    st.markdown("---")
    if region_filter.is_aggregate:
        st.subheader(f"Übersicht: {region_filter.category.value}")
        render_pie_charts(snapshot.super_regions, region_filter.category)
    elif region_filter.metric_key() is None:
        st.info(f"Unbekannter Wert: {region_filter.value}")
    else:
        st.subheader(f"{region_filter.category.value}: {region_filter.value}")
        render_region_table(snapshot, region_filter, today)

    # Footer
    st.markdown("---")
    st.caption(f"Stand: {datetime.now().strftime('%Y-%m-%d %H:%M')}")


def run_dashboard():
    """Entry point for running dashboard."""
    main()


if __name__ == "__main__":
    main()
