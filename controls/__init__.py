# Controls module
from .ui_actions import MapAction, MapControls, MapResponse, style_options

__all__ = [
    "MapAction",
    "MapControls",
    "MapResponse",
    "style_options",
]
