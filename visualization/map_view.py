"""Main PyDeck map component."""

from typing import Optional

import pydeck as pdk
import streamlit as st

from config.settings import settings
from .deck_engine import DeckEngine


def get_initial_view_state(
    center_lat: Optional[float] = None,
    center_lon: Optional[float] = None,
    zoom: Optional[int] = None,
    pitch: Optional[int] = None,
    bearing: Optional[int] = None,
) -> pdk.ViewState:
    """
    Create initial view state for the map.

    Args:
        center_lat: Latitude of map center
        center_lon: Longitude of map center
        zoom: Initial zoom level
        pitch: Tilt angle (0-60)
        bearing: Rotation angle

    Returns:
        PyDeck ViewState object
    """
    return pdk.ViewState(
        latitude=settings.map.center_lat if center_lat is None else center_lat,
        longitude=settings.map.center_lon if center_lon is None else center_lon,
        zoom=settings.map.default_zoom if zoom is None else zoom,
        pitch=settings.map.default_pitch if pitch is None else pitch,
        bearing=settings.map.default_bearing if bearing is None else bearing,
    )


def render_map(
    engine: DeckEngine,
    view_state: Optional[pdk.ViewState] = None,
    height: Optional[int] = None,
) -> pdk.Deck:
    """
    Render the engine's current style and overlays.

    Args:
        engine: Engine holding the style and overlay layers
        view_state: Custom view state (uses default if None)
        height: Map height in pixels

    Returns:
        PyDeck Deck object
    """
    if view_state is None:
        view_state = get_initial_view_state()

    deck = engine.to_deck(view_state)
    st.pydeck_chart(deck, use_container_width=True, height=height or settings.map.height)
    return deck
