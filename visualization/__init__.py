# Visualization module
from .deck_engine import DeckEngine
from .layers import create_overlay_layer
from .map_view import render_map

__all__ = ["DeckEngine", "create_overlay_layer", "render_map"]
