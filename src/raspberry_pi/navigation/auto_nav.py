"""
Basic abstraction of autonomous movements.

Reference offsets are measured once, for the RED alliance, in the frame of
the robot at its starting position. Everything alliance-specific goes
through finalize(); tasks never mirror vectors themselves.
"""

from __future__ import annotations

import logging
import math

from config import (
    CENTERED_ROTATION_BLUE_DEG,
    CENTERED_ROTATION_RED_DEG,
    CORNER_ROTATION_DEG,
    CRYPTOBOX_POSITION_CENTERED,
    CRYPTOBOX_POSITION_CORNER,
    CRYPTOBOX_WIDTH,
    JEWEL_ACCESS_OFFSET,
)
from navigation import route as routes
from navigation.route import Move, Turn
from navigation.vector import LEFT, RIGHT, ZERO, MotionVector, WaypointInstruction
from params import Alliance, MatchConfig
from sensors.marker import Marker

logger = logging.getLogger(__name__)


class AutoNav:
    """
    Turns mission intents into drivetrain moves and turns.

    Usage:
        nav = AutoNav(MatchConfig(Alliance.BLUE, starting_left=False), drivetrain)
        nav.go_to_structure(Marker.LEFT)
        ...
        nav.return_from_structure(Marker.LEFT)
    """

    def __init__(self, match: MatchConfig, drivetrain=None, turn_power: float | None = None):
        self.match = match
        self.drivetrain = drivetrain
        self.turn_power = turn_power  # None turns at the drivetrain default

    @property
    def is_starting_on_corner(self) -> bool:
        return self.match.starting_left == (self.match.alliance is Alliance.RED)

    def finalize(self, vector: MotionVector) -> MotionVector:
        """Apply alliance mirroring to a RED reference offset."""
        if self.match.alliance is Alliance.BLUE:
            return vector.mirrored()
        return vector

    def instructions_to_structure(self) -> WaypointInstruction:
        """Movement + rotation from the start to face the middle column."""
        if self.is_starting_on_corner:
            # Same rotation for the corner start of both alliances
            return WaypointInstruction(
                self.finalize(MotionVector.of(CRYPTOBOX_POSITION_CORNER)),
                math.radians(CORNER_ROTATION_DEG),
            )

        # RED has to turn around, BLUE is already lined up
        degrees = (
            CENTERED_ROTATION_BLUE_DEG
            if self.match.alliance is Alliance.BLUE
            else CENTERED_ROTATION_RED_DEG
        )
        return WaypointInstruction(
            self.finalize(MotionVector.of(CRYPTOBOX_POSITION_CENTERED)),
            math.radians(degrees),
        )

    @staticmethod
    def instructions_to_column(column: Marker) -> MotionVector:
        """Lateral shift from the middle column. Robot must face the cryptobox."""
        if column is Marker.LEFT:
            return LEFT * CRYPTOBOX_WIDTH
        if column is Marker.RIGHT:
            return RIGHT * CRYPTOBOX_WIDTH
        return ZERO

    def route_to_structure(self, column: Marker | None = None) -> tuple:
        """Route to face the middle column, shifted to ``column`` if given."""
        instruction = self.instructions_to_structure()
        legs = (Move(instruction.movement), Turn(instruction.rotation))
        if column is None:
            return legs
        return legs + (Move(self.instructions_to_column(column)),)

    def route_to_jewels(self) -> tuple:
        # Jewel arm is on the left side of the robot
        return (Move(self.finalize(LEFT * JEWEL_ACCESS_OFFSET)),)

    def go_to_structure(self, column: Marker | None = None) -> None:
        route = self.route_to_structure(column)
        logger.info(f"Going to cryptobox {_describe(column)}")
        self._execute(route)

    def return_from_structure(self, column: Marker | None = None) -> None:
        route = routes.inverse(self.route_to_structure(column))
        logger.info(f"Returning from cryptobox {_describe(column)}")
        self._execute(route)

    def begin_jewel_knock(self) -> None:
        self._execute(self.route_to_jewels())

    def end_jewel_knock(self) -> None:
        self._execute(routes.inverse(self.route_to_jewels()))

    def _execute(self, route: tuple) -> None:
        routes.execute(route, self._require_drivetrain(), self.turn_power)

    def _require_drivetrain(self):
        if self.drivetrain is None:
            raise RuntimeError("AutoNav has no drivetrain attached")
        return self.drivetrain


def _describe(column: Marker | None) -> str:
    return "front" if column is None else f"column {column.name}"
