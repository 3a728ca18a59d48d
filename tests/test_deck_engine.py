"""Tests for the pydeck-backed engine and overlay layer factories."""

import json

import pydeck as pdk
import pytest

from layers.controller import LayerVisibilityController
from layers.engine import EngineSession, MapEngineAdapter, MapOptions
from layers.models import BaseStyle
from layers.overlays import create_route_overlay
from visualization.deck_engine import DeckEngine
from visualization.layers import create_overlay_layer, hex_to_rgba


@pytest.fixture
def deck_options():
    return MapOptions(access_token="pk.test", style=BaseStyle.STREETS)


@pytest.fixture
def deck_controller(deck_options):
    controller = LayerVisibilityController(
        EngineSession(DeckEngine.create),
        overlays=[create_route_overlay()],
        initial_style=BaseStyle.STREETS,
    )
    controller.initialize(deck_options)
    return controller


class TestDeckEngine:
    """Tests for DeckEngine."""

    def test_satisfies_adapter_contract(self, deck_options):
        assert isinstance(DeckEngine(deck_options), MapEngineAdapter)

    def test_initial_style_load_pending(self, deck_options):
        engine = DeckEngine(deck_options)
        assert engine.is_style_loading
        assert engine.style_url == "mapbox://styles/mapbox/streets-v12"

    def test_finish_style_load_fires_once(self, deck_options):
        engine = DeckEngine(deck_options)
        fired = []
        engine.on_style_ready(lambda: fired.append(1))

        assert engine.finish_style_load() is True
        assert engine.finish_style_load() is False
        assert fired == [1]

    def test_set_style_wipes_layers(self, deck_controller):
        engine = deck_controller.engine
        engine.finish_style_load()
        assert engine.layer_ids() == ["routeLayer"]
        assert engine.source_ids() == ["routeSource"]

        deck_controller.select_base_style("dark")

        assert engine.layer_ids() == []
        assert engine.source_ids() == []
        assert engine.is_style_loading

        engine.finish_style_load()

        assert engine.layer_ids() == ["routeLayer"]
        assert engine.style_url == BaseStyle.DARK.url

    def test_layout_on_missing_layer_ignored(self, deck_options):
        engine = DeckEngine(deck_options)
        engine.set_layout_property("ghost", "visibility", "none")
        assert engine.get_layout_property("ghost", "visibility") is None

    def test_add_layer_overwrites(self, deck_options):
        engine = DeckEngine(deck_options)
        engine.add_source("s", {"type": "geojson", "data": {}})
        engine.add_layer({"id": "a", "source": "s", "type": "line"})
        engine.add_layer({"id": "a", "source": "s", "type": "fill"})

        assert engine.layer_ids() == ["a"]
        assert engine.build_layers()[0].type == "GeoJsonLayer"

    def test_layout_visibility_in_definition_is_honored(self, deck_options):
        engine = DeckEngine(deck_options)
        engine.add_source("s", {"type": "geojson", "data": {}})
        engine.add_layer({"id": "a", "source": "s", "type": "line", "layout": {"visibility": "none"}})

        assert engine.get_layout_property("a", "visibility") == "none"

    def test_to_deck(self, deck_controller):
        engine = deck_controller.engine
        engine.finish_style_load()
        deck_controller.toggle_all_overlays()

        deck = engine.to_deck(pdk.ViewState(latitude=37.83, longitude=-122.48, zoom=15))
        payload = json.loads(deck.to_json())

        assert payload["mapStyle"] == BaseStyle.STREETS.url
        assert payload["mapProvider"] == "mapbox"
        assert len(payload["layers"]) == 1
        assert payload["layers"][0]["id"] == "routeLayer"
        assert payload["layers"][0]["visible"] is False


class TestOverlayLayerFactories:
    """Tests for Mapbox definition to pydeck translation."""

    @pytest.mark.parametrize("value,expected", [
        ("#33bb6a", [0x33, 0xBB, 0x6A, 255]),
        ("#fff", [255, 255, 255, 255]),
        ("red", [100, 100, 100, 200]),
        ("#12345", [100, 100, 100, 200]),
        ("#zzzzzz", [100, 100, 100, 200]),
        (None, [100, 100, 100, 200]),
    ])
    def test_hex_to_rgba(self, value, expected):
        assert hex_to_rgba(value) == expected

    def test_hex_to_rgba_alpha(self):
        assert hex_to_rgba("#000000", 0.5)[3] == 128

    def test_route_becomes_line_layer(self):
        route = create_route_overlay()

        layer = create_overlay_layer(route.layer_definition(), route.source, "visible")
        payload = json.loads(layer.to_json())

        assert payload["@@type"] == "GeoJsonLayer"
        assert payload["id"] == "routeLayer"
        assert payload["getLineColor"] == [0x33, 0xBB, 0x6A, 255]
        assert payload["lineJointRounded"] is True
        assert payload["lineCapRounded"] is True
        assert payload["lineWidthUnits"] == "pixels"
        assert payload["visible"] is True

    @pytest.mark.parametrize("layer_type,prop", [
        ("fill", "getFillColor"),
        ("circle", "getPointRadius"),
    ])
    def test_other_types(self, layer_type, prop):
        definition = {"id": "x", "source": "s", "type": layer_type, "paint": {}}

        layer = create_overlay_layer(definition, {"data": {"type": "FeatureCollection", "features": []}}, "none")
        payload = json.loads(layer.to_json())

        assert prop in payload
        assert payload["visible"] is False

    def test_circle_radius_in_pixels(self):
        definition = {"id": "x", "source": "s", "type": "circle", "paint": {"circle-radius": 6}}

        layer = create_overlay_layer(definition, {"data": {"type": "FeatureCollection", "features": []}}, "visible")
        payload = json.loads(layer.to_json())

        assert payload["pointRadiusUnits"] == "pixels"
        assert payload["getPointRadius"] == 6
