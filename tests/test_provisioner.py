"""Tests for the overlay reconciliation plan and provisioner."""

import pytest

from layers.provisioner import (
    AddLayer,
    AddSource,
    OverlayProvisioner,
    SetVisibility,
    apply_commands,
    plan_reconciliation,
)

from fakes import FakeEngine, make_overlay


class TestPlanReconciliation:
    """Tests for the pure reconciliation plan."""

    def test_empty_descriptor_list(self):
        assert plan_reconciliation([]) == []

    def test_source_layer_visibility_per_overlay_in_order(self):
        a = make_overlay("a")
        b = make_overlay("b", visible=False)

        commands = plan_reconciliation([a, b])

        assert [type(c) for c in commands] == [
            AddSource, AddLayer, SetVisibility,
            AddSource, AddLayer, SetVisibility,
        ]
        assert commands[0] == AddSource("a-source", a.source)
        assert commands[1].layer_id == "a"
        assert commands[1].definition["source"] == "a-source"
        assert commands[2] == SetVisibility("a", "visible")
        assert commands[5] == SetVisibility("b", "none")

    def test_flag_read_at_plan_time(self):
        overlay = make_overlay("a")
        overlay.visible = False

        commands = plan_reconciliation([overlay])

        assert commands[-1] == SetVisibility("a", "none")


class TestApplyCommands:
    """Tests for replaying commands on an engine."""

    def test_replays_in_order(self):
        engine = FakeEngine()
        commands = plan_reconciliation([make_overlay("a")])

        applied = apply_commands(engine, commands)

        assert applied == 3
        assert engine.calls == [
            ("add_source", "a-source"),
            ("add_layer", "a"),
            ("set_layout_property", "a", "visible"),
        ]

    def test_unknown_command_rejected(self):
        with pytest.raises(TypeError):
            apply_commands(FakeEngine(), [object()])


class TestOverlayProvisioner:
    """Tests for OverlayProvisioner."""

    def test_reconcile_mirrors_descriptors(self):
        engine = FakeEngine()
        overlays = [make_overlay("a"), make_overlay("b", visible=False)]

        OverlayProvisioner().reconcile(engine, overlays)

        assert set(engine.layers) == {"a", "b"}
        assert set(engine.sources) == {"a-source", "b-source"}
        assert engine.get_layout_property("a", "visibility") == "visible"
        assert engine.get_layout_property("b", "visibility") == "none"

    def test_reconcile_twice_is_idempotent(self):
        engine = FakeEngine()
        overlays = [make_overlay("a"), make_overlay("b", visible=False)]
        provisioner = OverlayProvisioner()

        provisioner.reconcile(engine, overlays)
        once = (dict(engine.layers), {k: dict(v) for k, v in engine.layout.items()})
        provisioner.reconcile(engine, overlays)

        assert (engine.layers, engine.layout) == once

    def test_provision_single_overlay(self):
        engine = FakeEngine()

        commands = OverlayProvisioner().provision(engine, make_overlay("a", visible=False))

        assert len(commands) == 3
        assert engine.get_layout_property("a", "visibility") == "none"
