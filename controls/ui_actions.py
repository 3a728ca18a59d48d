"""UI action dispatch for the base-style and overlay controls."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from layers.controller import LayerVisibilityController
from layers.models import BaseStyle, Tracked, UnknownStyleError


@dataclass
class MapAction:
  """Represents a command issued by the layer menu."""

  action_type: str  # 'select_base_style', 'set_overlay_visibility', 'toggle_all_overlays'
  params: Dict[str, Any] = None

  def __post_init__(self):
    if self.params is None:
      self.params = {}


@dataclass
class MapResponse:
  """Response from a map action."""

  success: bool
  message: str = ""
  state_changed: bool = False
  new_state: Optional[Dict[str, Any]] = None
  error: Optional[str] = None


def style_options() -> List[Tuple[str, str]]:
  """(value, label) pairs for the base-style menu, in menu order."""
  return [(style.value, style.label) for style in BaseStyle]


class MapControls:
  """
  Command surface between the layer menu and the layer controller.

  Each action is forwarded to the controller and the outcome is reported
  as a MapResponse so the menu can show why a command had no effect.
  """

  def __init__(self, controller: LayerVisibilityController):
    """Initialize map controls for a controller."""
    self._controller = controller
    self._action_handlers: Dict[str, Callable] = {}
    self._setup_handlers()

  def _setup_handlers(self) -> None:
    """Set up action handlers."""
    self._action_handlers = {
        "select_base_style": self._handle_select_base_style,
        "set_overlay_visibility": self._handle_set_overlay_visibility,
        "toggle_all_overlays": self._handle_toggle_all_overlays,
    }

  @property
  def controller(self) -> LayerVisibilityController:
    return self._controller

  def execute_action(self, action: MapAction) -> MapResponse:
    """
    Execute a map action.

    Args:
        action: MapAction to execute

    Returns:
        MapResponse with result
    """
    handler = self._action_handlers.get(action.action_type)
    if handler:
      return handler(action.params)

    return MapResponse(
        success=False,
        error=f"Unknown action type: {action.action_type}",
    )

  def _not_ready_response(self) -> Optional[MapResponse]:
    if not self._controller.is_ready:
      return MapResponse(success=False, error="Map is not initialized yet")
    return None

  def _handle_select_base_style(self, params: Dict) -> MapResponse:
    """Handle base style switch action."""
    try:
      style = BaseStyle.parse(params.get("style"))
    except UnknownStyleError as e:
      return MapResponse(success=False, error=str(e))

    not_ready = self._not_ready_response()
    if not_ready:
      return not_ready

    if style == self._controller.selected_style:
      return MapResponse(success=True, message=f"{style.label} is already selected")

    self._controller.select_base_style(style)
    return MapResponse(
        success=True,
        message=f"Switched to {style.label} style",
        state_changed=True,
        new_state={"selected_style": style.value},
    )

  def _handle_set_overlay_visibility(self, params: Dict) -> MapResponse:
    """Handle single layer visibility action."""
    layer_id = params.get("layer_id")
    visible = bool(params.get("visible", True))

    if not layer_id:
      return MapResponse(success=False, error="No layer id specified")

    not_ready = self._not_ready_response()
    if not_ready:
      return not_ready
    if self._controller.is_style_loading:
      return MapResponse(success=False, error=f"Style is loading, {layer_id} was not changed")

    self._controller.set_overlay_visibility(layer_id, visible)
    tracked = isinstance(self._controller.resolve(layer_id), Tracked)
    return MapResponse(
        success=True,
        message=f"{'Showed' if visible else 'Hid'} layer: {layer_id}",
        state_changed=tracked,
        new_state={"overlays": self._overlay_flags()} if tracked else None,
    )

  def _handle_toggle_all_overlays(self, params: Dict) -> MapResponse:
    """Handle show/hide all overlays action."""
    not_ready = self._not_ready_response()
    if not_ready:
      return not_ready
    if self._controller.is_style_loading:
      return MapResponse(success=False, error="Style is loading, overlays were not changed")

    self._controller.toggle_all_overlays()
    all_visible = self._controller.all_visible
    return MapResponse(
        success=True,
        message=f"{'Showing' if all_visible else 'Hiding'} all overlays",
        state_changed=True,
        new_state={"all_visible": all_visible, "overlays": self._overlay_flags()},
    )

  def _overlay_flags(self) -> Dict[str, bool]:
    return {o.layer_id: o.visible for o in self._controller.overlays}

  def get_available_actions(self) -> List[Dict[str, Any]]:
    """
    Get list of available map actions.

    Returns:
        List of action descriptions
    """
    return [
        {
            "action": "select_base_style",
            "description": "Switch the base map style",
            "params": ["style"],
            "values": [value for value, _ in style_options()],
        },
        {
            "action": "set_overlay_visibility",
            "description": "Show or hide one overlay layer",
            "params": ["layer_id", "visible"],
            "values": self._controller.overlay_ids,
        },
        {
            "action": "toggle_all_overlays",
            "description": "Show or hide every overlay at once",
            "params": [],
        },
    ]

  def get_current_state(self) -> Dict[str, Any]:
    """
    Get current map state for rendering the layer menu.

    Returns:
        Dictionary of current state values
    """
    style = self._controller.selected_style
    return {
        "selected_style": style.value,
        "selected_style_label": style.label,
        "all_visible": self._controller.all_visible,
        "overlays": self._overlay_flags(),
        "ready": self._controller.is_ready,
        "style_loading": self._controller.is_style_loading,
    }
