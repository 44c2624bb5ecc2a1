"""Filter controls for the avalanche map.

Two dropdowns: the metric family (danger levels or avalanche problems) and
the value within it. The value list always starts with "alle", which
switches the map to the aggregate pie chart view.

Usage:
    from avalanchemap.dashboard.components.filter_controls import render_filter_controls

    region_filter = render_filter_controls(st.sidebar)
    session.set_filter(region_filter)
"""

import streamlit as st

from avalanchemap.regions.models import (
    ALL_VALUE,
    DANGER_LEVELS,
    PROBLEM_LABEL_TO_KEY,
    Filter,
    FilterCategory,
)

# Session state keys
CATEGORY_KEY = "filter_category"
VALUE_KEY = "filter_value"

CATEGORY_OPTIONS = [category.value for category in FilterCategory]


def value_options(category) -> list[str]:
    """Dropdown values for a metric family.

    Args:
        category: FilterCategory or its display string

    Returns:
        "alle" followed by the danger levels or the avalanche problem labels

    Examples:
        >>> value_options("Gefahrenstufe")
        ['alle', '1', '2', '3', '4', '5']
    """
    category = FilterCategory(category)
    if category is FilterCategory.DANGER_LEVEL:
        return [ALL_VALUE, *DANGER_LEVELS]
    return [ALL_VALUE, *PROBLEM_LABEL_TO_KEY]


def format_value(value: str) -> str:
    """Display text for a dropdown value."""
    if value == ALL_VALUE:
        return "Alle (Übersicht)"
    if value in DANGER_LEVELS:
        return f"Gefahrenstufe {value}"
    return value


def render_filter_controls(container=None) -> Filter:
    """Render the category and value dropdowns.

    Switching the category resets the value to "alle" since values of one
    family are meaningless in the other.

    Args:
        container: Streamlit container (st, st.sidebar, st.columns()[0], etc.)
                   If None, uses st directly.

    Returns:
        Filter built from the current selection
    """
    target = container if container is not None else st

    category = target.selectbox(
        "Kategorie",
        CATEGORY_OPTIONS,
        key=CATEGORY_KEY,
    )

    options = value_options(category)
    if st.session_state.get(VALUE_KEY) not in options:
        st.session_state[VALUE_KEY] = ALL_VALUE

    value = target.selectbox(
        "Wert",
        options,
        key=VALUE_KEY,
        format_func=format_value,
    )

    return Filter(category, value)
