# app/streamlit_app.py
# Chlorophyll-a overlay map
# Shows the service's plot for a chosen day over an ocean basemap and lets the
# user nudge the overlay's edges with margin buttons.

import logging
from datetime import datetime
import sys
import os

import streamlit as st
from streamlit_folium import st_folium

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import MAP_HEIGHT, USE_FETCHED_OVERLAY
from backend.map_state import MapView
from backend.map_layers import create_map

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

def get_map_view():
    """One MapView per browser session; a new session starts from defaults."""
    if "map_view" not in st.session_state:
        st.session_state.map_view = MapView()
    return st.session_state.map_view


def picker_value(date_str):
    """YYYYMMDD -> datetime.date for the date input, None if unparseable."""
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str, "%Y%m%d").date()
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Map view
# ---------------------------------------------------------------------------

def render_margin_controls(view):
    s = view.state
    st.write(f"{s.north_margin} {s.south_margin} {s.east_margin} {s.west_margin}")
    st.markdown("#### Adjust Error Margins:")

    pairs = [
        ("North", view.increase_north, view.decrease_north),
        ("South", view.increase_south, view.decrease_south),
        ("East",  view.increase_east,  view.decrease_east),
        ("West",  view.increase_west,  view.decrease_west),
    ]
    for label, increase, decrease in pairs:
        c1, c2 = st.columns(2)
        c1.button(f"Increase {label} Error", on_click=increase,
                  key=f"inc_{label.lower()}", use_container_width=True)
        c2.button(f"Decrease {label} Error", on_click=decrease,
                  key=f"dec_{label.lower()}", use_container_width=True)


def render_date_picker(view):
    def _on_change():
        view.select_date(st.session_state.date_picker)

    _, mid, _ = st.columns([1, 1, 1])
    with mid:
        st.date_input(
            "**Select Date:**",
            value=picker_value(view.state.date),
            key="date_picker",
            on_change=_on_change,
        )


def render_map_view():
    view = get_map_view()

    map_col, controls_col = st.columns([4, 1])

    with controls_col:
        status = st.empty()
        if view.needs_fetch():
            with st.spinner("Loading image..."):
                view.sync()

        if view.state.loading:
            status.write("Loading image...")
        elif view.state.error:
            status.error(view.state.error)
        else:
            status.empty()

        render_margin_controls(view)

    with map_col:
        image = view.current_image() if USE_FETCHED_OVERLAY else None
        m = create_map(view.state, image=image)
        st_folium(m, height=MAP_HEIGHT, use_container_width=True,
                  key="overlay_map", returned_objects=[])

    render_date_picker(view)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Chlorophyll-a Overlay Map",
    page_icon="🌊",
    layout="wide"
)

render_map_view()
