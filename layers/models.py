"""Base styles, overlay descriptors and overlay references."""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

STYLE_URL_PREFIX = "mapbox://styles/"
STYLE_OWNER = "mapbox"

VISIBLE = "visible"
HIDDEN = "none"


class UnknownStyleError(ValueError):
    """Raised when a value does not name one of the base styles."""


class BaseStyle(Enum):
    """Base map styles offered in the layer menu."""

    SATELLITE = "satellite-streets-v12"
    STREETS = "streets-v12"
    OUTDOORS = "outdoors-v11"
    LIGHT = "light-v10"
    DARK = "dark-v10"
    NAVIGATION = "navigation-day-v1"

    @property
    def label(self) -> str:
        return _STYLE_LABELS[self]

    @property
    def style_path(self) -> str:
        """Owner-qualified style id, e.g. ``mapbox/dark-v10``."""
        return f"{STYLE_OWNER}/{self.value}"

    @property
    def url(self) -> str:
        return f"{STYLE_URL_PREFIX}{self.style_path}"

    @classmethod
    def parse(cls, value: Union["BaseStyle", str]) -> "BaseStyle":
        """
        Resolve a style from the forms the UI and configuration use.

        Accepts a member, a member name ("dark"), a style id ("dark-v10"),
        an owner-qualified id ("mapbox/dark-v10") or a full style URL.

        Raises:
            UnknownStyleError: If the value names no base style
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownStyleError(f"Unknown base style: {value!r}")

        text = value.strip()
        if text.startswith(STYLE_URL_PREFIX):
            text = text[len(STYLE_URL_PREFIX):]
        if text.startswith(f"{STYLE_OWNER}/"):
            text = text[len(STYLE_OWNER) + 1:]

        for style in cls:
            if text == style.value or text.upper() == style.name:
                return style
        raise UnknownStyleError(f"Unknown base style: {value!r}")


_STYLE_LABELS = {
    BaseStyle.SATELLITE: "Satellite",
    BaseStyle.STREETS: "Street",
    BaseStyle.OUTDOORS: "Outdoors",
    BaseStyle.LIGHT: "Light",
    BaseStyle.DARK: "Dark",
    BaseStyle.NAVIGATION: "Navigation",
}


def to_visibility(visible: bool) -> str:
    """Map a visibility flag to the engine's layout value."""
    return VISIBLE if visible else HIDDEN


def is_visible(value: Optional[str]) -> bool:
    # Layers without an explicit layout value are drawn
    return value != HIDDEN


@dataclass
class OverlayLayer:
    """
    An application-injected layer drawn on top of the base style.

    Attributes:
        layer_id: Unique id, used as the engine layer id
        source: Engine source payload, e.g. {"type": "geojson", "data": ...}
        render_style: Layer definition without id/source (type, layout, paint)
        visible: Whether the overlay should be shown
        source_id: Engine source id (defaults to "<layer_id>-source")
    """

    layer_id: str
    source: Dict[str, Any]
    render_style: Dict[str, Any]
    visible: bool = True
    source_id: Optional[str] = None

    def __post_init__(self):
        if not self.layer_id:
            raise ValueError("Overlay layer_id must be a non-empty string")
        if self.source_id is None:
            self.source_id = f"{self.layer_id}-source"

    def layer_definition(self) -> Dict[str, Any]:
        """Engine layer definition referencing this overlay's source."""
        definition = copy.deepcopy(self.render_style)
        definition["id"] = self.layer_id
        definition["source"] = self.source_id
        return definition

    @classmethod
    def from_geojson(
        cls,
        layer_id: str,
        data: Dict[str, Any],
        render_style: Dict[str, Any],
        visible: bool = True,
        source_id: Optional[str] = None,
    ) -> "OverlayLayer":
        """
        Wrap a GeoJSON Feature or FeatureCollection as an overlay.

        Args:
            layer_id: Overlay id
            data: GeoJSON object
            render_style: Layer definition without id/source
            visible: Initial visibility
            source_id: Optional explicit source id

        Returns:
            OverlayLayer with a geojson source payload
        """
        geojson_type = data.get("type") if isinstance(data, dict) else None
        if geojson_type not in ("Feature", "FeatureCollection"):
            raise ValueError(
                f"Overlay {layer_id} needs a GeoJSON Feature or FeatureCollection, "
                f"got {geojson_type!r}"
            )
        return cls(
            layer_id=layer_id,
            source={"type": "geojson", "data": data},
            render_style=render_style,
            visible=visible,
            source_id=source_id,
        )


@dataclass(frozen=True)
class Tracked:
    """Reference to an overlay in the controller's descriptor list."""

    layer_id: str


@dataclass(frozen=True)
class EngineNative:
    """Reference to a layer only the engine knows about."""

    layer_id: str


OverlayReference = Union[Tracked, EngineNative]
