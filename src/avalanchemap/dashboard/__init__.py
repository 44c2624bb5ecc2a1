"""Streamlit dashboard for the avalanche map.

This module provides:

- components: Reusable map, chart and filter components

Run the dashboard with:
    streamlit run src/avalanchemap/dashboard/app.py
"""
