"""Tests for waypoint navigation."""

import math

import numpy as np
import pytest

from config import CRYPTOBOX_WIDTH
from drivetrain import SimulatedDrivetrain
from navigation import AutoNav, MotionVector, Navigator, Waypoint, column_waypoint
from params import Alliance, MatchConfig
from sensors import Marker


@pytest.fixture
def navigator(red_left, drivetrain) -> Navigator:
    return Navigator(AutoNav(red_left, drivetrain))


@pytest.mark.parametrize(
    "marker, expected",
    [
        (Marker.LEFT, Waypoint.LOAD_COLUMN_1),
        (Marker.CENTER, Waypoint.LOAD_COLUMN_2),
        (Marker.RIGHT, Waypoint.LOAD_COLUMN_3),
        (Marker.UNKNOWN, Waypoint.LOAD_COLUMN_1),
        (None, Waypoint.LOAD_COLUMN_1),
    ],
)
def test_column_waypoint(marker, expected):
    assert column_waypoint(marker) is expected


def test_starts_at_start(navigator):
    assert navigator.position is Waypoint.START


def test_same_waypoint_is_noop(navigator, drivetrain):
    navigator.go_to_position(Waypoint.JEWEL_KNOCK)
    count = len(drivetrain.commands)
    navigator.go_to_position(Waypoint.JEWEL_KNOCK)
    assert len(drivetrain.commands) == count


def test_accepts_waypoint_name(navigator):
    navigator.go_to_position("safe-zone")
    assert navigator.position is Waypoint.SAFE_ZONE


def test_unknown_name_raises(navigator):
    with pytest.raises(ValueError):
        navigator.go_to_position("nowhere")


def test_backs_out_before_next_trip(navigator, drivetrain):
    navigator.go_to_position(Waypoint.JEWEL_KNOCK)
    navigator.go_to_position(Waypoint.LOAD_COLUMN_3)

    moves = drivetrain.moves
    assert [c.kind for c in moves] == ["move", "move", "move", "turn", "move"]
    assert moves[0].vector == MotionVector(-0.3, 0.0)
    assert moves[1].vector == MotionVector(0.3, 0.0)
    assert moves[2].vector == MotionVector(-2.0, 36.0)
    assert moves[3].radians == pytest.approx(math.pi / 2)
    assert moves[4].vector == MotionVector(CRYPTOBOX_WIDTH, 0.0)
    assert navigator.position is Waypoint.LOAD_COLUMN_3


def test_return_to_start_restores_pose(drivetrain):
    navigator = Navigator(AutoNav(MatchConfig(Alliance.BLUE, starting_left=False), drivetrain))
    navigator.go_to_position(Waypoint.LOAD_COLUMN_1)
    navigator.go_to_position(Waypoint.SAFE_ZONE)
    navigator.return_to_start()

    assert navigator.position is Waypoint.START
    np.testing.assert_allclose(drivetrain.position, [0.0, 0.0], atol=1e-9)
    assert drivetrain.heading == pytest.approx(0.0, abs=1e-12)


def test_safe_zone_has_no_column_leg(navigator, drivetrain):
    navigator.go_to_position(Waypoint.SAFE_ZONE)
    assert [c.kind for c in drivetrain.moves] == ["move", "turn"]


def test_start_from_start_drives_nothing(navigator, drivetrain):
    navigator.go_to_position(Waypoint.START)
    assert drivetrain.commands == []


def test_turns_use_turn_power(red_left, drivetrain):
    navigator = Navigator(AutoNav(red_left, drivetrain, turn_power=0.6))
    navigator.go_to_position(Waypoint.LOAD_COLUMN_2)
    navigator.return_to_start()

    turns = [c for c in drivetrain.moves if c.kind == "turn"]
    moves = [c for c in drivetrain.moves if c.kind == "move"]
    assert [c.power for c in turns] == [pytest.approx(0.6)] * 2
    assert all(c.power == pytest.approx(drivetrain.default_power) for c in moves)


def test_requires_drivetrain(red_left):
    navigator = Navigator(AutoNav(red_left))
    with pytest.raises(RuntimeError):
        navigator.go_to_position(Waypoint.SAFE_ZONE)
    assert navigator.position is Waypoint.START
