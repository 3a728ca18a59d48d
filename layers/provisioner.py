"""Recreate overlay sources and layers on the engine after a style load."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Union

from .engine import VISIBILITY_PROPERTY, MapEngineAdapter
from .models import OverlayLayer, to_visibility

logger = logging.getLogger("layers.provisioner")


@dataclass(frozen=True)
class AddSource:
    source_id: str
    payload: Dict[str, Any]


@dataclass(frozen=True)
class AddLayer:
    definition: Dict[str, Any]

    @property
    def layer_id(self) -> str:
        return self.definition["id"]


@dataclass(frozen=True)
class SetVisibility:
    layer_id: str
    value: str


EngineCommand = Union[AddSource, AddLayer, SetVisibility]


def plan_overlay(overlay: OverlayLayer) -> List[EngineCommand]:
    """Commands that put one overlay on the engine with its current flag."""
    return [
        AddSource(overlay.source_id, overlay.source),
        AddLayer(overlay.layer_definition()),
        SetVisibility(overlay.layer_id, to_visibility(overlay.visible)),
    ]


def plan_reconciliation(overlays: Iterable[OverlayLayer]) -> List[EngineCommand]:
    """
    Build the engine commands that mirror the overlay descriptors.

    Overlays are provisioned in list order; each one's visibility flag is
    read now, not when the overlay was created.

    Args:
        overlays: Overlay descriptors in draw order

    Returns:
        Source, layer and visibility commands for every overlay
    """
    commands: List[EngineCommand] = []
    for overlay in overlays:
        commands.extend(plan_overlay(overlay))
    return commands


def apply_commands(engine: MapEngineAdapter, commands: Iterable[EngineCommand]) -> int:
    """
    Replay planned commands on an engine.

    Returns:
        Number of commands applied
    """
    applied = 0
    for command in commands:
        if isinstance(command, AddSource):
            engine.add_source(command.source_id, command.payload)
        elif isinstance(command, AddLayer):
            engine.add_layer(command.definition)
        elif isinstance(command, SetVisibility):
            engine.set_layout_property(command.layer_id, VISIBILITY_PROPERTY, command.value)
        else:
            raise TypeError(f"Unsupported engine command: {command!r}")
        applied += 1
    return applied


class OverlayProvisioner:
    """Repopulates engine-side overlays from the controller's descriptors."""

    def reconcile(self, engine: MapEngineAdapter, overlays: Iterable[OverlayLayer]) -> List[EngineCommand]:
        """
        Re-add every overlay after a style-ready event.

        Safe to run more than once for the same style: re-adding an id
        overwrites the engine's copy.

        Args:
            engine: Engine whose style just finished loading
            overlays: Overlay descriptors in draw order

        Returns:
            The commands that were applied
        """
        commands = plan_reconciliation(overlays)
        apply_commands(engine, commands)
        layer_ids = [c.layer_id for c in commands if isinstance(c, AddLayer)]
        logger.info(f"Reconciled {len(layer_ids)} overlay(s): {', '.join(layer_ids) or '-'}")
        return commands

    def provision(self, engine: MapEngineAdapter, overlay: OverlayLayer) -> List[EngineCommand]:
        """Add a single overlay to an engine whose style is already loaded."""
        commands = plan_overlay(overlay)
        apply_commands(engine, commands)
        logger.debug(f"Provisioned overlay {overlay.layer_id}")
        return commands
