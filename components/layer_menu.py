"""Sidebar layer menu: base style selection and overlay toggles."""

from typing import Dict

import streamlit as st

from controls.ui_actions import MapAction, MapControls, MapResponse, style_options


STYLE_RADIO_KEY = "base_style_radio"
ALL_OVERLAYS_KEY = "all_overlays_checkbox"
OVERLAY_KEY_PREFIX = "overlay_checkbox_"
RESPONSE_KEY = "layer_menu_response"

# Label of the aggregate toggle in the Assets group
ASSETS_TOGGLE_LABEL = "Trees"


def _store_response(response: MapResponse) -> None:
  st.session_state[RESPONSE_KEY] = response


def _on_style_change(controls: MapControls) -> None:
  style = st.session_state[STYLE_RADIO_KEY]
  _store_response(controls.execute_action(
      MapAction(action_type="select_base_style", params={"style": style})
  ))


def _on_toggle_all(controls: MapControls) -> None:
  _store_response(controls.execute_action(MapAction(action_type="toggle_all_overlays")))


def _on_overlay_change(controls: MapControls, layer_id: str) -> None:
  visible = st.session_state[f"{OVERLAY_KEY_PREFIX}{layer_id}"]
  _store_response(controls.execute_action(
      MapAction(
          action_type="set_overlay_visibility",
          params={"layer_id": layer_id, "visible": visible},
      )
  ))


def sync_widget_state(controls: MapControls) -> Dict:
  """
  Copy controller state into the menu's widget keys.

  Widgets are driven by the controller, so a command the controller
  dropped snaps its widget back on the next run.

  Returns:
      Current map state
  """
  state = controls.get_current_state()
  st.session_state[STYLE_RADIO_KEY] = state["selected_style"]
  st.session_state[ALL_OVERLAYS_KEY] = state["all_visible"]
  for layer_id, visible in state["overlays"].items():
    st.session_state[f"{OVERLAY_KEY_PREFIX}{layer_id}"] = visible
  return state


def render_layer_menu(controls: MapControls) -> Dict:
  """
  Render the layer menu in the sidebar.

  Args:
      controls: Command surface of the active map session

  Returns:
      Map state the menu was rendered from
  """
  state = sync_widget_state(controls)
  labels = dict(style_options())

  with st.sidebar:
    st.markdown("##### Layers")
    st.radio(
        "Base style",
        options=list(labels.keys()),
        format_func=lambda value: labels[value],
        key=STYLE_RADIO_KEY,
        on_change=_on_style_change,
        args=(controls,),
        label_visibility="collapsed",
    )

    st.divider()

    st.markdown("##### Assets")
    st.checkbox(
        ASSETS_TOGGLE_LABEL,
        key=ALL_OVERLAYS_KEY,
        on_change=_on_toggle_all,
        args=(controls,),
    )

    if len(state["overlays"]) > 1:
      for layer_id in state["overlays"]:
        st.checkbox(
            layer_id,
            key=f"{OVERLAY_KEY_PREFIX}{layer_id}",
            on_change=_on_overlay_change,
            args=(controls, layer_id),
        )

    response = st.session_state.pop(RESPONSE_KEY, None)
    if response is not None and not response.success:
      st.warning(response.error)
    elif response is not None and response.message:
      st.caption(response.message)

  return state
