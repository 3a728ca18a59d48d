"""
Basemap Layers
Base style picker and overlay toggles on a PyDeck map
"""

import logging
import sys
from pathlib import Path

import streamlit as st

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import settings
from components.layer_menu import render_layer_menu
from controls.ui_actions import MapControls
from layers.controller import LayerVisibilityController
from layers.engine import EngineSession, MapOptions
from layers.overlays import build_overlays
from visualization.deck_engine import DeckEngine
from visualization.map_view import render_map

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title="Basemap Layers",
    page_icon="🗺️",
    layout="wide",
    initial_sidebar_state="expanded",
)

SESSION_CONTROLS_KEY = "map_controls"


def configure_logging() -> None:
    """Attach a console handler to the app's loggers once per process."""
    level = getattr(logging, settings.log_level, logging.INFO)
    for name in ("layers", "visualization"):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            logger.addHandler(handler)


def inject_custom_css():
    """Inject custom CSS for a full-page map."""
    st.markdown(
        """
        <style>
        #MainMenu, footer, header {visibility: hidden;}

        .block-container {
            padding: 0 !important;
            max-width: 100% !important;
        }

        [data-testid="stDeckGlJsonChart"] {
            position: fixed !important;
            top: 0 !important;
            left: 0 !important;
            width: 100vw !important;
            height: 100vh !important;
            z-index: 0 !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def get_map_controls() -> MapControls:
    """
    Map controls for this browser session, created on first use.

    The controller, its engine session and the overlays live in session
    state so they survive reruns.
    """
    if SESSION_CONTROLS_KEY not in st.session_state:
        controller = LayerVisibilityController(
            EngineSession(DeckEngine.create),
            overlays=build_overlays(settings.overlays),
            initial_style=settings.map.default_style,
        )
        st.session_state[SESSION_CONTROLS_KEY] = MapControls(controller)
    return st.session_state[SESSION_CONTROLS_KEY]


def main():
    """Main application entry point."""
    configure_logging()
    inject_custom_css()

    if not settings.mapbox.access_token:
        st.sidebar.warning("MAPBOX_TOKEN is not set, base styles will not load")

    controls = get_map_controls()
    controller = controls.controller

    # Idempotent: only the first run creates the engine
    controller.initialize(MapOptions.from_settings(settings))

    render_layer_menu(controls)

    # The style requested by this run finishes loading before the map is drawn
    engine = controller.engine
    engine.finish_style_load()

    render_map(engine)


if __name__ == "__main__":
    main()
