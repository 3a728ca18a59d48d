# Components module
from .layer_menu import render_layer_menu

__all__ = ["render_layer_menu"]
