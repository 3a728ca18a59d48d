"""PyDeck layer factories for engine overlay definitions."""

from typing import Any, Dict, List

import pydeck as pdk

from layers.models import is_visible


_DEFAULT_COLOR: List[int] = [100, 100, 100, 200]


def hex_to_rgba(value: Any, alpha: float = 1.0) -> List[int]:
  """
  Convert a Mapbox color to a deck.gl RGBA list.

  Args:
      value: "#rrggbb" or "#rgb" string (anything else gives the default)
      alpha: Opacity multiplier (0-1)

  Returns:
      [r, g, b, a] with components in 0-255
  """
  if not isinstance(value, str) or not value.startswith("#"):
    return list(_DEFAULT_COLOR)

  digits = value[1:]
  if len(digits) == 3:
    digits = "".join(c * 2 for c in digits)
  if len(digits) != 6:
    return list(_DEFAULT_COLOR)

  try:
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
  except ValueError:
    return list(_DEFAULT_COLOR)
  return [r, g, b, int(round(255 * max(0.0, min(1.0, alpha))))]


def create_overlay_layer(
    definition: Dict[str, Any],
    source: Dict[str, Any],
    visibility: Any = None,
) -> pdk.Layer:
  """
  Factory function to create PyDeck layers from engine layer definitions.

  Args:
      definition: Mapbox-style layer definition (id, type, layout, paint)
      source: Source payload the definition refers to
      visibility: Layout visibility value ("visible", "none" or None)

  Returns:
      PyDeck Layer object
  """
  layer_factories = {
      "line": create_line_layer,
      "fill": create_fill_layer,
      "circle": create_circle_layer,
  }

  factory = layer_factories.get(definition.get("type"), create_line_layer)
  return factory(
      layer_id=definition["id"],
      data=source.get("data", []),
      layout=definition.get("layout") or {},
      paint=definition.get("paint") or {},
      visible=is_visible(visibility),
  )


def create_line_layer(
    layer_id: str,
    data: Any,
    layout: Dict[str, Any],
    paint: Dict[str, Any],
    visible: bool = True,
) -> pdk.Layer:
  """
  Create a GeoJsonLayer drawing lines.

  Args:
      layer_id: Layer id
      data: GeoJSON object
      layout: Mapbox layout properties (line-join, line-cap)
      paint: Mapbox paint properties (line-color, line-width, line-opacity)
      visible: Whether deck.gl draws the layer

  Returns:
      GeoJsonLayer
  """
  return pdk.Layer(
      "GeoJsonLayer",
      id=layer_id,
      data=data,
      stroked=True,
      filled=False,
      get_line_color=hex_to_rgba(paint.get("line-color"), paint.get("line-opacity", 1.0)),
      get_line_width=paint.get("line-width", 2),
      line_width_units="pixels",
      line_width_min_pixels=paint.get("line-width", 2),
      line_joint_rounded=layout.get("line-join") == "round",
      line_cap_rounded=layout.get("line-cap") == "round",
      visible=visible,
      pickable=False,
  )


def create_fill_layer(
    layer_id: str,
    data: Any,
    layout: Dict[str, Any],
    paint: Dict[str, Any],
    visible: bool = True,
) -> pdk.Layer:
  """Create a GeoJsonLayer drawing filled polygons."""
  outline = paint.get("fill-outline-color", paint.get("fill-color"))
  return pdk.Layer(
      "GeoJsonLayer",
      id=layer_id,
      data=data,
      stroked=outline is not None,
      filled=True,
      get_fill_color=hex_to_rgba(paint.get("fill-color"), paint.get("fill-opacity", 1.0)),
      get_line_color=hex_to_rgba(outline),
      line_width_min_pixels=1,
      visible=visible,
      pickable=False,
  )


def create_circle_layer(
    layer_id: str,
    data: Any,
    layout: Dict[str, Any],
    paint: Dict[str, Any],
    visible: bool = True,
) -> pdk.Layer:
  """Create a GeoJsonLayer drawing points as circles."""
  return pdk.Layer(
      "GeoJsonLayer",
      id=layer_id,
      data=data,
      filled=True,
      stroked=False,
      get_fill_color=hex_to_rgba(paint.get("circle-color"), paint.get("circle-opacity", 1.0)),
      get_point_radius=paint.get("circle-radius", 5),
      point_radius_units="pixels",
      point_radius_min_pixels=paint.get("circle-radius", 5),
      visible=visible,
      pickable=False,
  )
