"""Tests for motion vectors, alliance mirroring and cryptobox routes."""

import math

import numpy as np
import pytest

from config import CRYPTOBOX_WIDTH, JEWEL_ACCESS_OFFSET
from drivetrain import SimulatedDrivetrain
from navigation import AutoNav, MotionVector
from navigation import route as routes
from navigation.route import Move, Turn
from params import Alliance, MatchConfig
from sensors import Marker


def nav_for(alliance: Alliance, starting_left: bool, drivetrain=None) -> AutoNav:
    return AutoNav(MatchConfig(alliance, starting_left), drivetrain)


class TestMotionVector:
    def test_negate(self):
        assert MotionVector(3.0, -4.0).negate() == MotionVector(-3.0, 4.0)
        assert -MotionVector(1.0, 2.0) == MotionVector(-1.0, -2.0)

    def test_mirrored_flips_only_y(self):
        assert MotionVector(12.0, -26.0).mirrored() == MotionVector(12.0, 26.0)

    def test_composition(self):
        v = MotionVector(1.0, 2.0) + MotionVector(3.0, -1.0)
        assert v == MotionVector(4.0, 1.0)
        assert 2 * MotionVector(1.0, -1.5) == MotionVector(2.0, -3.0)
        assert MotionVector(1.0, 1.0) - MotionVector(1.0, 1.0) == MotionVector()

    def test_rotated_quarter_turn(self):
        v = MotionVector(1.0, 0.0).rotated(math.pi / 2)
        assert v.x == pytest.approx(0.0, abs=1e-12)
        assert v.y == pytest.approx(1.0)

    def test_norm_and_array(self):
        v = MotionVector(3.0, 4.0)
        assert v.norm == 5.0
        np.testing.assert_array_equal(v.as_array(), np.array([3.0, 4.0]))

    def test_frozen(self):
        with pytest.raises(AttributeError):
            MotionVector().x = 1.0


class TestStartingOnCorner:
    @pytest.mark.parametrize(
        "alliance, starting_left, expected",
        [
            (Alliance.RED, True, True),
            (Alliance.RED, False, False),
            (Alliance.BLUE, True, False),
            (Alliance.BLUE, False, True),
        ],
    )
    def test_truth_table(self, alliance, starting_left, expected):
        assert nav_for(alliance, starting_left).is_starting_on_corner is expected


class TestFinalize:
    def test_red_is_identity(self):
        nav = nav_for(Alliance.RED, True)
        v = MotionVector(-2.0, 36.0)
        assert nav.finalize(v) == v

    def test_blue_mirrors(self):
        nav = nav_for(Alliance.BLUE, True)
        assert nav.finalize(MotionVector(-2.0, 36.0)) == MotionVector(-2.0, -36.0)

    @pytest.mark.parametrize("alliance", [Alliance.RED, Alliance.BLUE])
    def test_twice_is_identity(self, alliance):
        nav = nav_for(alliance, True)
        v = MotionVector(12.0, -26.0)
        assert nav.finalize(nav.finalize(v)) == v


class TestInstructionsToStructure:
    def test_red_left_uses_corner_and_quarter_turn(self):
        instruction = nav_for(Alliance.RED, True).instructions_to_structure()
        assert instruction.movement == MotionVector(-2.0, 36.0)
        assert instruction.rotation == pytest.approx(math.pi / 2)

    def test_blue_left_uses_centered_mirrored_no_turn(self):
        instruction = nav_for(Alliance.BLUE, True).instructions_to_structure()
        assert instruction.movement == MotionVector(12.0, 26.0)
        assert instruction.rotation == 0.0

    def test_red_right_turns_around(self):
        instruction = nav_for(Alliance.RED, False).instructions_to_structure()
        assert instruction.movement == MotionVector(12.0, -26.0)
        assert instruction.rotation == pytest.approx(math.pi)

    def test_blue_right_uses_corner_mirrored(self):
        instruction = nav_for(Alliance.BLUE, False).instructions_to_structure()
        assert instruction.movement == MotionVector(-2.0, -36.0)
        assert instruction.rotation == pytest.approx(math.pi / 2)


class TestColumnOffset:
    def test_left_is_negative_width(self):
        assert AutoNav.instructions_to_column(Marker.LEFT) == MotionVector(-CRYPTOBOX_WIDTH, 0.0)

    def test_right_is_positive_width(self):
        assert AutoNav.instructions_to_column(Marker.RIGHT) == MotionVector(CRYPTOBOX_WIDTH, 0.0)

    @pytest.mark.parametrize("column", [Marker.CENTER, Marker.UNKNOWN])
    def test_center_and_unknown_are_zero(self, column):
        assert AutoNav.instructions_to_column(column).is_zero


class TestGoAndReturn:
    def test_go_to_structure_issues_move_turn_move(self):
        drivetrain = SimulatedDrivetrain()
        nav = nav_for(Alliance.RED, True, drivetrain)
        nav.go_to_structure(Marker.LEFT)

        kinds = [c.kind for c in drivetrain.commands]
        assert kinds == ["move", "turn", "move"]
        assert drivetrain.commands[0].vector == MotionVector(-2.0, 36.0)
        assert drivetrain.commands[1].radians == pytest.approx(math.pi / 2)
        assert drivetrain.commands[2].vector == MotionVector(-CRYPTOBOX_WIDTH, 0.0)

    def test_return_is_exact_inverse_in_reverse_order(self):
        drivetrain = SimulatedDrivetrain()
        nav = nav_for(Alliance.RED, True, drivetrain)
        nav.return_from_structure(Marker.RIGHT)

        commands = drivetrain.commands
        assert [c.kind for c in commands] == ["move", "turn", "move"]
        assert commands[0].vector == MotionVector(-CRYPTOBOX_WIDTH, 0.0)
        assert commands[1].radians == pytest.approx(-math.pi / 2)
        assert commands[2].vector == MotionVector(2.0, -36.0)

    @pytest.mark.parametrize("alliance", [Alliance.RED, Alliance.BLUE])
    @pytest.mark.parametrize("starting_left", [True, False])
    @pytest.mark.parametrize("column", [Marker.LEFT, Marker.CENTER, Marker.RIGHT])
    def test_round_trip_restores_pose(self, alliance, starting_left, column):
        drivetrain = SimulatedDrivetrain()
        nav = nav_for(alliance, starting_left, drivetrain)

        nav.go_to_structure(column)
        nav.return_from_structure(column)

        np.testing.assert_allclose(drivetrain.position, [0.0, 0.0], atol=1e-9)
        assert drivetrain.heading == pytest.approx(0.0, abs=1e-12)

    def test_route_and_inverse_sum_to_zero(self):
        nav = nav_for(Alliance.BLUE, False)
        route = nav.route_to_structure(Marker.LEFT)
        displacement, rotation = routes.net_motion(route + routes.inverse(route))
        assert displacement.x == pytest.approx(0.0, abs=1e-12)
        assert displacement.y == pytest.approx(0.0, abs=1e-12)
        assert rotation == pytest.approx(0.0, abs=1e-12)

    def test_inverse_of_inverse_is_route(self):
        route = (Move(MotionVector(1.0, 2.0)), Turn(0.5), Move(MotionVector(-3.0, 0.0)))
        assert routes.inverse(routes.inverse(route)) == route

    def test_jewel_approach_and_back(self):
        drivetrain = SimulatedDrivetrain()
        nav = nav_for(Alliance.BLUE, True, drivetrain)
        nav.begin_jewel_knock()
        assert drivetrain.commands[-1].vector == MotionVector(-JEWEL_ACCESS_OFFSET, 0.0)
        nav.end_jewel_knock()
        np.testing.assert_allclose(drivetrain.position, [0.0, 0.0], atol=1e-12)

    def test_without_drivetrain_raises(self):
        with pytest.raises(RuntimeError):
            nav_for(Alliance.RED, True).go_to_structure(Marker.CENTER)
