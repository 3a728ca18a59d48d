"""Overlay layers shipped with the app and loaders for extra overlays."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import OverlayLayer

logger = logging.getLogger("layers.overlays")

ROUTE_LAYER_ID = "routeLayer"
ROUTE_SOURCE_ID = "routeSource"

ROUTE_COORDINATES: List[List[float]] = [
    [-122.48369693756104, 37.83381888486939],
    [-122.48348236083984, 37.83317489144141],
    [-122.48339653015138, 37.83270036637107],
    [-122.48356819152832, 37.832056363179625],
    [-122.48404026031496, 37.83114119107971],
    [-122.48404026031496, 37.83049717427869],
    [-122.48348236083984, 37.829920943955045],
    [-122.48356819152832, 37.82954808664175],
    [-122.48507022857666, 37.82944639795659],
    [-122.48610019683838, 37.82880236636284],
    [-122.48695850372314, 37.82931081282506],
    [-122.48700141906738, 37.83080223556934],
    [-122.48751640319824, 37.83168351665737],
    [-122.48803138732912, 37.832158048267786],
    [-122.48888969421387, 37.83297152392784],
    [-122.48987674713133, 37.83263257682617],
    [-122.49043464660643, 37.832937629287755],
    [-122.49125003814696, 37.832429207817725],
    [-122.49163627624512, 37.832564787218985],
    [-122.49223709106445, 37.83337825839438],
    [-122.49378204345702, 37.83368330777276],
]

ROUTE_STYLE: Dict[str, Any] = {
    "type": "line",
    "layout": {
        "line-join": "round",
        "line-cap": "round",
    },
    "paint": {
        "line-color": "#33bb6a",
        "line-width": 8,
    },
}

# Styles applied to loaded GeoJSON, keyed by the first feature's geometry type
_DEFAULT_STYLES: Dict[str, Dict[str, Any]] = {
    "Point": {"type": "circle", "paint": {"circle-color": "#f97316", "circle-radius": 6}},
    "MultiPoint": {"type": "circle", "paint": {"circle-color": "#f97316", "circle-radius": 6}},
    "LineString": ROUTE_STYLE,
    "MultiLineString": ROUTE_STYLE,
    "Polygon": {"type": "fill", "paint": {"fill-color": "#228b22", "fill-opacity": 0.4}},
    "MultiPolygon": {"type": "fill", "paint": {"fill-color": "#228b22", "fill-opacity": 0.4}},
}


def create_route_overlay(visible: bool = True) -> OverlayLayer:
    """Demo route drawn as a rounded green line."""
    return OverlayLayer.from_geojson(
        ROUTE_LAYER_ID,
        {
            "type": "Feature",
            "properties": {},
            "geometry": {"type": "LineString", "coordinates": ROUTE_COORDINATES},
        },
        render_style=ROUTE_STYLE,
        visible=visible,
        source_id=ROUTE_SOURCE_ID,
    )


def _first_geometry_type(data: Dict[str, Any]) -> Optional[str]:
    if data.get("type") == "Feature":
        return (data.get("geometry") or {}).get("type")
    for feature in data.get("features") or []:
        geometry_type = (feature.get("geometry") or {}).get("type")
        if geometry_type:
            return geometry_type
    return None


def default_render_style(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pick a render style matching the GeoJSON's geometry.

    Args:
        data: GeoJSON Feature or FeatureCollection

    Returns:
        Layer definition without id/source
    """
    return _DEFAULT_STYLES.get(_first_geometry_type(data), ROUTE_STYLE)


def load_geojson_overlay(path: Path, visible: bool = True) -> OverlayLayer:
    """
    Load one GeoJSON file as an overlay.

    The file stem is the layer id. A top-level "renderStyle" member, when
    present, overrides the default style for the geometry type.

    Args:
        path: Path to a .geojson file
        visible: Initial visibility

    Returns:
        OverlayLayer for the file
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} is not a GeoJSON object")

    render_style = data.pop("renderStyle", None) or default_render_style(data)
    return OverlayLayer.from_geojson(path.stem, data, render_style=render_style, visible=visible)


def load_overlay_dir(directory: str) -> List[OverlayLayer]:
    """
    Load every *.geojson file in a directory, sorted by name.

    Files that cannot be parsed are skipped with a warning.
    """
    root = Path(directory)
    if not root.is_dir():
        logger.warning(f"Overlay directory not found: {directory}")
        return []

    overlays = []
    for path in sorted(root.glob("*.geojson")):
        try:
            overlays.append(load_geojson_overlay(path))
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping overlay {path.name}: {e}")
    return overlays


def build_overlays(overlay_settings) -> List[OverlayLayer]:
    """
    Overlays for a new map session.

    Args:
        overlay_settings: OverlayConfig from settings

    Returns:
        Overlay descriptors in draw order
    """
    overlays = []
    if overlay_settings.include_demo_route:
        overlays.append(create_route_overlay())
    if overlay_settings.geojson_dir:
        overlays.extend(load_overlay_dir(overlay_settings.geojson_dir))
    return overlays
