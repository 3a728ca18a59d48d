"""Shared fixtures for the layer controller tests."""

from typing import List

import pytest

from layers.controller import LayerVisibilityController
from layers.engine import EngineSession, MapOptions
from layers.models import BaseStyle, OverlayLayer

from fakes import FakeEngine, make_overlay


@pytest.fixture
def engines() -> List[FakeEngine]:
    """Every engine created by the session factory."""
    return []


@pytest.fixture
def session(engines) -> EngineSession:
    def factory(options: MapOptions) -> FakeEngine:
        engine = FakeEngine(options)
        engines.append(engine)
        return engine

    return EngineSession(factory)


@pytest.fixture
def options() -> MapOptions:
    return MapOptions(access_token="test-token", style=BaseStyle.SATELLITE)


@pytest.fixture
def route() -> OverlayLayer:
    return make_overlay("route")


@pytest.fixture
def controller(session, route) -> LayerVisibilityController:
    """Controller for a streets map with a visible route, not yet initialized."""
    return LayerVisibilityController(session, overlays=[route], initial_style="streets")


@pytest.fixture
def ready_controller(controller, options, engines) -> LayerVisibilityController:
    """Controller whose engine exists and finished its initial style load."""
    controller.initialize(options)
    engines[0].fire_style_ready()
    return controller


@pytest.fixture
def engine(ready_controller, engines) -> FakeEngine:
    return engines[0]
