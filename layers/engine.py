"""Map engine contract and the create-once engine session."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, runtime_checkable

from .models import BaseStyle

logger = logging.getLogger("layers.engine")

VISIBILITY_PROPERTY = "visibility"

StyleReadyListener = Callable[[], None]


@runtime_checkable
class MapEngineAdapter(Protocol):
    """
    Operations the layer controller needs from a rendering engine.

    The engine owns the rendered map. ``set_style`` reloads the whole
    rendering context, discarding every injected source and layer, and is
    followed later by a style-ready notification. Registration calls
    overwrite existing ids. Layout and removal calls on unknown ids are
    ignored.
    """

    def set_style(self, style_url: str) -> None: ...

    def on_style_ready(self, listener: StyleReadyListener) -> None: ...

    def add_source(self, source_id: str, payload: Dict[str, Any]) -> None: ...

    def add_layer(self, definition: Dict[str, Any]) -> None: ...

    def remove_layer(self, layer_id: str) -> None: ...

    def remove_source(self, source_id: str) -> None: ...

    def get_layout_property(self, layer_id: str, name: str) -> Optional[str]: ...

    def set_layout_property(self, layer_id: str, name: str, value: str) -> None: ...


@dataclass
class MapOptions:
    """Engine initialization input, passed through to the engine factory once."""

    access_token: str
    style: BaseStyle
    center: Tuple[float, float] = (0.0, 0.0)  # (lon, lat)
    zoom: float = 16
    container: Any = None

    @classmethod
    def from_settings(cls, settings, container: Any = None) -> "MapOptions":
        """
        Build options from application settings.

        Args:
            settings: Settings instance
            container: Opaque container handle for the engine

        Returns:
            MapOptions for the configured default style and view
        """
        return cls(
            access_token=settings.mapbox.access_token,
            style=BaseStyle.parse(settings.map.default_style),
            center=(settings.map.center_lon, settings.map.center_lat),
            zoom=settings.map.default_zoom,
            container=container,
        )


EngineFactory = Callable[[MapOptions], MapEngineAdapter]


class EngineSession:
    """
    Owns the engine for one map session.

    The engine is created lazily on the first request and reused after
    that; repeated requests never create a second engine.
    """

    def __init__(self, factory: EngineFactory):
        self._factory = factory
        self._adapter: Optional[MapEngineAdapter] = None

    @property
    def adapter(self) -> Optional[MapEngineAdapter]:
        return self._adapter

    def request(
        self,
        options: MapOptions,
        on_style_ready: Optional[StyleReadyListener] = None,
    ) -> bool:
        """
        Create the engine if this session has none yet.

        Args:
            options: Initialization options for the engine
            on_style_ready: Listener registered on the new engine

        Returns:
            True if an engine was created, False if one already existed
        """
        if self._adapter is not None:
            logger.debug("Engine already created for this session, ignoring request")
            return False

        adapter = self._factory(options)
        if on_style_ready is not None:
            adapter.on_style_ready(on_style_ready)
        self._adapter = adapter
        logger.info(f"Created map engine with style {options.style.url}")
        return True

    def close(self) -> None:
        """End the session; a later request creates a fresh engine."""
        self._adapter = None
