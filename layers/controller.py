"""Authoritative base-style and overlay visibility state."""

import logging
from collections import OrderedDict
from dataclasses import replace
from typing import Iterable, List, Optional, Union

from .engine import VISIBILITY_PROPERTY, EngineSession, MapEngineAdapter, MapOptions
from .models import (
    BaseStyle,
    EngineNative,
    OverlayLayer,
    OverlayReference,
    Tracked,
    UnknownStyleError,
    is_visible,
    to_visibility,
)
from .provisioner import OverlayProvisioner

logger = logging.getLogger("layers.controller")


class LayerVisibilityController:
    """
    Keeps the selected base style and overlay visibility consistent with
    the map engine.

    The engine drops every injected layer when its style changes. The
    controller's descriptors are the source of truth and are pushed back
    to the engine on each style-ready event. Commands never raise: anything
    that cannot be applied is logged and ignored.
    """

    def __init__(
        self,
        session: EngineSession,
        overlays: Iterable[OverlayLayer] = (),
        initial_style: Union[BaseStyle, str] = BaseStyle.SATELLITE,
        provisioner: Optional[OverlayProvisioner] = None,
    ):
        self._session = session
        self._provisioner = provisioner or OverlayProvisioner()
        self._style = BaseStyle.parse(initial_style)
        self._overlays: "OrderedDict[str, OverlayLayer]" = OrderedDict()
        for overlay in overlays:
            self._overlays[overlay.layer_id] = overlay
        self._all_visible = all(o.visible for o in self._overlays.values())
        self._style_loading = False

    @property
    def selected_style(self) -> BaseStyle:
        return self._style

    @property
    def all_visible(self) -> bool:
        """True iff every overlay is visible; the stored flag when there are none."""
        if self._overlays:
            return all(o.visible for o in self._overlays.values())
        return self._all_visible

    @property
    def overlays(self) -> List[OverlayLayer]:
        return list(self._overlays.values())

    @property
    def overlay_ids(self) -> List[str]:
        return list(self._overlays.keys())

    @property
    def engine(self) -> Optional[MapEngineAdapter]:
        return self._session.adapter

    @property
    def is_ready(self) -> bool:
        return self._session.adapter is not None

    @property
    def is_style_loading(self) -> bool:
        """True between a style request and its style-ready event."""
        return self._style_loading

    def get_overlay(self, layer_id: str) -> Optional[OverlayLayer]:
        return self._overlays.get(layer_id)

    def resolve(self, layer_id: str) -> OverlayReference:
        """Classify an id as a tracked overlay or an engine-only layer."""
        if layer_id in self._overlays:
            return Tracked(layer_id)
        return EngineNative(layer_id)

    def initialize(self, options: MapOptions) -> bool:
        """
        Create the engine for this session if it does not exist yet.

        The initial style load ends in a style-ready event like any other
        style change, so the controller waits for it before touching
        overlays.

        Args:
            options: Engine options; options.style is replaced by the
                currently selected style

        Returns:
            True if an engine was created by this call
        """
        options = replace(options, style=self._style)
        created = self._session.request(options, on_style_ready=self.handle_style_ready)
        if created:
            self._style_loading = True
        return created

    def handle_style_ready(self) -> None:
        """Engine callback: the style finished loading, re-add overlays."""
        engine = self._session.adapter
        if engine is None:
            logger.info("Style-ready received without an engine, ignoring")
            return
        self._provisioner.reconcile(engine, self._overlays.values())
        self._style_loading = False

    def select_base_style(self, style: Union[BaseStyle, str]) -> None:
        """
        Switch the base style.

        Overlays are not touched here; the engine discards them and the
        following style-ready event restores them.
        """
        try:
            new_style = BaseStyle.parse(style)
        except UnknownStyleError as e:
            logger.warning(f"Rejected style selection: {e}")
            return

        engine = self._session.adapter
        if engine is None:
            logger.info(f"Engine not ready, ignoring style selection {new_style.value}")
            return

        self._style = new_style
        self._style_loading = True
        engine.set_style(new_style.url)
        logger.info(f"Requested base style {new_style.url}")

    def set_overlay_visibility(self, layer_id: str, visible: bool) -> None:
        """
        Show or hide one layer.

        Tracked overlays get their flag updated and pushed to the engine.
        Any other id is treated as a layer owned by the engine: its current
        visibility is read back and flipped if it differs from the request.
        """
        engine = self._settled_engine("set_overlay_visibility", layer_id)
        if engine is None:
            return

        reference = self.resolve(layer_id)
        if isinstance(reference, Tracked):
            overlay = self._overlays[reference.layer_id]
            overlay.visible = bool(visible)
            engine.set_layout_property(
                overlay.layer_id, VISIBILITY_PROPERTY, to_visibility(overlay.visible)
            )
            return

        current = engine.get_layout_property(reference.layer_id, VISIBILITY_PROPERTY)
        logger.debug(f"Visibility of engine layer {reference.layer_id}: {current}")
        if is_visible(current) == bool(visible):
            return
        flipped = to_visibility(not is_visible(current))
        engine.set_layout_property(reference.layer_id, VISIBILITY_PROPERTY, flipped)

    def toggle_all_overlays(self) -> None:
        """Flip the aggregate flag and apply it to every tracked overlay."""
        engine = self._settled_engine("toggle_all_overlays")
        if engine is None:
            return

        new_visible = not self.all_visible
        value = to_visibility(new_visible)
        for overlay in self._overlays.values():
            overlay.visible = new_visible
            engine.set_layout_property(overlay.layer_id, VISIBILITY_PROPERTY, value)
        self._all_visible = new_visible

    def add_overlay(self, overlay: OverlayLayer) -> None:
        """
        Track a new overlay, replacing any overlay with the same id.

        It is drawn right away when the engine is idle, otherwise by the
        next reconciliation.
        """
        self._overlays[overlay.layer_id] = overlay
        engine = self._session.adapter
        if engine is not None and not self._style_loading:
            self._provisioner.provision(engine, overlay)

    def remove_overlay(self, layer_id: str) -> bool:
        """
        Stop tracking an overlay and take it off the engine.

        Returns:
            True if the overlay was tracked
        """
        if layer_id not in self._overlays:
            return False
        # the stored flag stands in once the last overlay is gone
        self._all_visible = self.all_visible
        overlay = self._overlays.pop(layer_id)
        engine = self._session.adapter
        if engine is not None and not self._style_loading:
            engine.remove_layer(overlay.layer_id)
            engine.remove_source(overlay.source_id)
        return True

    def _settled_engine(self, command: str, layer_id: str = "") -> Optional[MapEngineAdapter]:
        """Engine to mutate, or None if it is missing or mid style load."""
        engine = self._session.adapter
        target = f" for {layer_id}" if layer_id else ""
        if engine is None:
            logger.info(f"Engine not ready, ignoring {command}{target}")
            return None
        if self._style_loading:
            logger.info(f"Style still loading, dropping {command}{target}")
            return None
        return engine
