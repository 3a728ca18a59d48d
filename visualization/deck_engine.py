"""PyDeck-backed map engine used by the Streamlit app."""

import copy
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional

import pydeck as pdk

from layers.engine import VISIBILITY_PROPERTY, MapOptions
from .layers import create_overlay_layer

logger = logging.getLogger("visualization.deck_engine")


class DeckEngine:
    """
    Map engine that renders through pydeck.

    Mirrors the Mapbox GL style lifecycle: assigning a style discards every
    added source and layer, and the style-ready listeners fire once the
    load completes. In a Streamlit run the load completes when the app
    calls ``finish_style_load()`` just before drawing the deck.
    """

    def __init__(self, options: MapOptions):
        self._access_token = options.access_token
        self._container = options.container
        self._style_url = options.style.url
        self._sources: Dict[str, Dict[str, Any]] = {}
        self._layers: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._layout: Dict[str, Dict[str, str]] = {}
        self._listeners: List[Callable[[], None]] = []
        self._style_loading = True

    @classmethod
    def create(cls, options: MapOptions) -> "DeckEngine":
        """Engine factory for EngineSession."""
        return cls(options)

    @property
    def style_url(self) -> str:
        return self._style_url

    @property
    def is_style_loading(self) -> bool:
        return self._style_loading

    def layer_ids(self) -> List[str]:
        return list(self._layers.keys())

    def source_ids(self) -> List[str]:
        return list(self._sources.keys())

    def set_style(self, style_url: str) -> None:
        self._style_url = style_url
        self._sources.clear()
        self._layers.clear()
        self._layout.clear()
        self._style_loading = True
        logger.debug(f"Loading style {style_url}")

    def on_style_ready(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def finish_style_load(self) -> bool:
        """
        Complete a pending style load and notify listeners.

        Returns:
            True if a load was pending
        """
        if not self._style_loading:
            return False
        self._style_loading = False
        logger.debug(f"Style ready: {self._style_url}")
        for listener in list(self._listeners):
            listener()
        return True

    def add_source(self, source_id: str, payload: Dict[str, Any]) -> None:
        self._sources[source_id] = copy.deepcopy(payload)

    def add_layer(self, definition: Dict[str, Any]) -> None:
        layer_id = definition["id"]
        if definition.get("source") not in self._sources:
            logger.warning(f"Layer {layer_id} references unknown source {definition.get('source')}")
        self._layers[layer_id] = copy.deepcopy(definition)
        visibility = (definition.get("layout") or {}).get(VISIBILITY_PROPERTY)
        if visibility is not None:
            self._layout.setdefault(layer_id, {})[VISIBILITY_PROPERTY] = visibility

    def remove_layer(self, layer_id: str) -> None:
        self._layers.pop(layer_id, None)
        self._layout.pop(layer_id, None)

    def remove_source(self, source_id: str) -> None:
        self._sources.pop(source_id, None)

    def get_layout_property(self, layer_id: str, name: str) -> Optional[str]:
        return self._layout.get(layer_id, {}).get(name)

    def set_layout_property(self, layer_id: str, name: str, value: str) -> None:
        if layer_id not in self._layers:
            logger.warning(f"Cannot set {name} on missing layer {layer_id}")
            return
        self._layout.setdefault(layer_id, {})[name] = value

    def build_layers(self) -> List[pdk.Layer]:
        """PyDeck layers for every added layer, in insertion order."""
        layers = []
        for layer_id, definition in self._layers.items():
            source = self._sources.get(definition.get("source"), {})
            visibility = self.get_layout_property(layer_id, VISIBILITY_PROPERTY)
            layers.append(create_overlay_layer(definition, source, visibility))
        return layers

    def to_deck(
        self,
        view_state: pdk.ViewState,
        tooltip: Optional[Dict] = None,
    ) -> pdk.Deck:
        """
        Build the deck for the current style and layers.

        Args:
            view_state: Initial camera
            tooltip: Optional tooltip configuration

        Returns:
            PyDeck Deck object
        """
        return pdk.Deck(
            layers=self.build_layers(),
            initial_view_state=view_state,
            tooltip=tooltip,
            map_provider="mapbox",
            map_style=self._style_url,
            api_keys={"mapbox": self._access_token} if self._access_token else None,
        )
