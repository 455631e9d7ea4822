"""Tests for the autonomous run loop."""

import math

import pytest

from control import AutonomousController, ConfigLocked, Hardware
from decision import Task, TaskResult
from navigation import MotionVector
from params import Alliance
from sensors import Marker

EXPECTED_ORDER = ["knock_jewel", "read_marker", "place_in_cryptobox", "park_in_safe_zone"]


@pytest.fixture
def controller(params, setup, telemetry, simulated_factory) -> AutonomousController:
    return AutonomousController(
        params=params,
        setup=setup,
        telemetry=telemetry,
        hardware_factory=simulated_factory,
    )


def labels(telemetry, level=None) -> list[str]:
    return [line.label for line in telemetry.lines() if level is None or line.level == level]


class TestSimulatedRun:
    def test_runs_every_task_in_order(self, controller, telemetry):
        state = controller.run()

        assert state is not None
        assert state.completed
        assert state.marker is Marker.CENTER
        assert controller.decider.snapshot()["order"] == EXPECTED_ORDER
        assert labels(telemetry).count("Performing next task") == 4
        for name in EXPECTED_ORDER:
            assert f"Task {name} successful?" in labels(telemetry)

    def test_outcomes(self, controller):
        controller.run()
        results = {o.task: o.result for o in controller.decider.outcomes}
        assert results == {
            "knock_jewel": TaskResult.SUCCESS,
            "read_marker": TaskResult.SUCCESS,
            "place_in_cryptobox": TaskResult.NOT_SUPPORTED,
            "park_in_safe_zone": TaskResult.SUCCESS,
        }

    def test_drivetrain_commands(self, controller, simulated_factory):
        controller.run()
        drivetrain = simulated_factory.built.drivetrain
        moves = [(c.kind, c.vector if c.kind == "move" else c.radians) for c in drivetrain.moves]

        assert moves[0] == ("move", MotionVector(-0.3, 0.0))
        # Back out from the jewels, drive to the middle column
        assert moves[1] == ("move", MotionVector(0.3, 0.0))
        assert moves[2] == ("move", MotionVector(-2.0, 36.0))
        assert moves[3][0] == "turn" and moves[3][1] == pytest.approx(math.pi / 2)
        # Back out from column 2, then into the safe zone
        assert moves[4][0] == "turn" and moves[4][1] == pytest.approx(-math.pi / 2)
        assert moves[5] == ("move", MotionVector(2.0, -36.0))
        assert moves[6] == ("move", MotionVector(-2.0, 36.0))
        assert moves[7][0] == "turn" and moves[7][1] == pytest.approx(math.pi / 2)
        assert len(moves) == 8
        assert drivetrain.commands[-1].kind == "stop"

    def test_setup_unlocked_after_run(self, controller, setup):
        controller.run()
        assert not setup.is_locked
        assert not controller.is_running
        setup.handle({"x": True})

    def test_setup_locked_during_run(self, controller, setup):
        seen = []

        def wait_for_start():
            seen.append((controller.is_running, setup.is_locked))
            with pytest.raises(ConfigLocked):
                setup.handle({"x": True})

        controller.run(wait_for_start)
        assert seen == [(True, True)]

    def test_unknown_marker_still_places_in_column_one(self, controller, simulated_factory, telemetry):
        simulated_factory.marker = Marker.UNKNOWN
        state = controller.run()

        assert state.completed
        results = {o.task: o.success for o in controller.decider.outcomes}
        assert results["read_marker"] is False
        assert any("UNKNOWN" in line.value for line in telemetry.lines() if line.level == "warning")

    def test_indeterminate_jewel_is_reported_and_run_continues(self, controller, simulated_factory):
        simulated_factory.jewel = None
        state = controller.run()
        assert state.completed
        assert controller.decider.outcomes[0].success is False

    def test_summary_reported(self, controller, telemetry):
        controller.run()
        summary = {line.label: line.value for line in telemetry.lines()}
        assert summary["Tasks scored"] == "knock_jewel, read_marker, park_in_safe_zone"
        assert summary["Tasks not supported yet"] == "place_in_cryptobox"


class TestInitialization:
    def test_failure_reports_fatal_and_runs_nothing(self, params, setup, telemetry):
        def broken(p):
            raise RuntimeError("Failed to connect to motor controller")

        controller = AutonomousController(
            params=params, setup=setup, telemetry=telemetry, hardware_factory=broken
        )
        assert controller.run() is None
        fatal = [line for line in telemetry.lines() if line.level == "fatal"]
        assert len(fatal) == 1
        assert "Failed to connect to motor controller" in fatal[0].value
        assert "Performing next task" not in labels(telemetry)
        assert not setup.is_locked

    def test_failure_without_message(self, params, setup, telemetry):
        def broken(p):
            raise RuntimeError()

        controller = AutonomousController(
            params=params, setup=setup, telemetry=telemetry, hardware_factory=broken
        )
        assert controller.init_all() is False
        assert "for a reason unknown to humankind" in telemetry.lines()[-1].value

    def test_invalid_catalog_fails_init(self, params, setup, telemetry, simulated_factory):
        def cyclic():
            return (
                Task("a", 0.5, 0.5, body=lambda ctx: True, requires=("b",)),
                Task("b", 0.5, 0.5, body=lambda ctx: True, requires=("a",)),
            )

        controller = AutonomousController(
            params=params,
            setup=setup,
            telemetry=telemetry,
            hardware_factory=simulated_factory,
            catalog_factory=cyclic,
        )
        assert controller.run() is None
        assert "FATAL" in labels(telemetry, "fatal")


class TestAbort:
    def test_exception_stops_drivetrain_and_propagates(
        self, params, setup, telemetry, simulated_factory
    ):
        def jammed(ctx):
            raise OSError("arm jammed")

        controller = AutonomousController(
            params=params,
            setup=setup,
            telemetry=telemetry,
            hardware_factory=simulated_factory,
            catalog_factory=lambda: (Task("jam", 0.5, 0.5, body=jammed),),
        )
        with pytest.raises(OSError):
            controller.run()

        assert simulated_factory.built.drivetrain.commands[-1].kind == "stop"
        assert not setup.is_locked
        assert not controller.is_running
        assert any("arm jammed" in line.value for line in telemetry.lines() if line.level == "fatal")

    def test_no_reentrant_run(self, controller):
        with pytest.raises(RuntimeError, match="already active"):
            controller.run(controller.run)
        assert not controller.is_running


def test_budget_checked_between_tasks(controller, params, telemetry):
    params.run_budget = 0.0
    state = controller.run()

    assert state is not None
    assert not state.completed
    assert controller.decider.outcomes == []
    assert "Performing next task" not in labels(telemetry)
    assert any("Out of time" in line.value for line in telemetry.lines())


def test_rank_by_reliability_param(controller, params):
    params.rank_by_reliability = True
    controller.run()
    assert controller.decider.rank_by_reliability


def test_snapshot(controller):
    assert controller.snapshot()["mission"] is None
    controller.run()
    snapshot = controller.snapshot()
    assert snapshot["running"] is False
    assert snapshot["match"] == {"alliance": "red", "starting_left": True}
    assert snapshot["mission"]["marker"] == "CENTER"
    assert snapshot["decision"]["done"] is True


class TestMatchLock:
    def test_config_frozen_before_hardware_comes_up(self, params, setup, telemetry):
        refused = []

        def toggling_factory(p):
            # Operator presses X while the robot is still connecting
            try:
                setup.handle({"x": True})
            except ConfigLocked:
                refused.append(True)
            return Hardware.simulated(p)

        controller = AutonomousController(
            params=params, setup=setup, telemetry=telemetry, hardware_factory=toggling_factory
        )
        state = controller.run()

        assert refused == [True]
        assert controller.navigator.nav.match.alliance is state.match.alliance
        assert state.match.alliance is Alliance.RED
        assert setup.current.alliance is Alliance.RED

    def test_lock_held_elsewhere_builds_no_hardware(self, controller, setup, simulated_factory):
        setup.lock()
        with pytest.raises(ConfigLocked):
            controller.run()
        assert simulated_factory.built is None
        assert not controller.is_running

    def test_init_failure_releases_lock(self, params, setup, telemetry):
        locked = []

        def broken(p):
            locked.append(setup.is_locked)
            raise RuntimeError("Failed to start camera")

        controller = AutonomousController(
            params=params, setup=setup, telemetry=telemetry, hardware_factory=broken
        )
        assert controller.run() is None
        assert locked == [True]
        assert not setup.is_locked
        assert setup.handle({"a": True}).starting_left is False


def test_turns_use_turn_power_param(controller, params, simulated_factory):
    params.turn_power = 0.5
    controller.run()
    turns = [c for c in simulated_factory.built.drivetrain.moves if c.kind == "turn"]
    assert turns
    assert all(c.power == pytest.approx(0.5) for c in turns)
