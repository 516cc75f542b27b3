# backend/map_layers.py
# Folium map construction: ocean base tiles plus the positioned overlay.

import sys
import os

import folium
from folium.raster_layers import ImageOverlay

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import (
    MAP_CENTER,
    MAP_ZOOM,
    MAP_MIN_ZOOM,
    TILE_URL,
    TILE_ATTRIBUTION,
    TILE_OPACITY,
    TILE_MIN_ZOOM,
    OVERLAY_IMAGE_URL,
    OVERLAY_OPACITY,
)
from backend.map_state import overlay_bounds

WORLD_BOUNDS = [[-90, -180], [90, 180]]


def create_base_map():
    """Return a folium map with the ocean basemap, panning held to the world."""
    m = folium.Map(
        location=MAP_CENTER,
        zoom_start=MAP_ZOOM,
        min_zoom=MAP_MIN_ZOOM,
        tiles=None,
        scrollWheelZoom=True,
        max_bounds=True,
        min_lat=WORLD_BOUNDS[0][0],
        max_lat=WORLD_BOUNDS[1][0],
        min_lon=WORLD_BOUNDS[0][1],
        max_lon=WORLD_BOUNDS[1][1],
    )
    folium.TileLayer(
        tiles=TILE_URL,
        attr=TILE_ATTRIBUTION,
        name="World Ocean Base",
        opacity=TILE_OPACITY,
        min_zoom=TILE_MIN_ZOOM,
        bounds=WORLD_BOUNDS,
    ).add_to(m)
    return m


def create_map(state, image=None):
    """Build the page map for the current view state.

    Args:
        state (MapViewState): Margins and the fetched image reference.
        image: Decoded fetched image (numpy array). When given it is drawn
            instead of the static overlay URL.

    Returns:
        folium.Map
    """
    m = create_base_map()

    # Overlay only appears once a fetch has succeeded
    if state.image_url is not None:
        ImageOverlay(
            image=image if image is not None else OVERLAY_IMAGE_URL,
            bounds=overlay_bounds(state),
            opacity=OVERLAY_OPACITY,
            interactive=False,
            cross_origin=True,
            name="Chlorophyll-a",
        ).add_to(m)

    return m
