# Layers module
from .controller import LayerVisibilityController
from .engine import EngineSession, MapEngineAdapter, MapOptions
from .models import BaseStyle, EngineNative, OverlayLayer, Tracked, UnknownStyleError
from .provisioner import OverlayProvisioner, plan_reconciliation

__all__ = [
    "LayerVisibilityController",
    "EngineSession",
    "MapEngineAdapter",
    "MapOptions",
    "BaseStyle",
    "EngineNative",
    "OverlayLayer",
    "Tracked",
    "UnknownStyleError",
    "OverlayProvisioner",
    "plan_reconciliation",
]
