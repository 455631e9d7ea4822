"""
Routes - ordered legs of blocking drivetrain calls.

A route is a tuple of Move / Turn legs. The way back along a route is
always its algebraic inverse: legs in reverse order, each one negated.
"""

from __future__ import annotations

from dataclasses import dataclass

from navigation.vector import ZERO, MotionVector


@dataclass(frozen=True)
class Move:
    """Translate by a vector in the robot's current frame."""

    vector: MotionVector

    def inverse(self) -> Move:
        return Move(self.vector.negate())

    def drive(self, drivetrain, power: float | None = None) -> None:
        drivetrain.move(self.vector, power)


@dataclass(frozen=True)
class Turn:
    """Rotate in place by a signed angle (radians, CCW positive)."""

    radians: float

    def inverse(self) -> Turn:
        return Turn(-self.radians)

    def drive(self, drivetrain, power: float | None = None) -> None:
        drivetrain.turn(self.radians, power)


def inverse(route: tuple) -> tuple:
    """Route that undoes ``route`` leg by leg."""
    return tuple(leg.inverse() for leg in reversed(route))


def execute(route: tuple, drivetrain, turn_power: float | None = None) -> None:
    """Drive every leg in order. Each call blocks until motors are idle.

    Turns use ``turn_power`` when given, moves the drivetrain default.
    """
    for leg in route:
        if isinstance(leg, Turn):
            leg.drive(drivetrain, turn_power)
        else:
            leg.drive(drivetrain)


def net_motion(route: tuple) -> tuple[MotionVector, float]:
    """Algebraic sum of the route's moves and turns.

    Ignores the frame change a turn introduces; it is the bookkeeping
    sum, used to check that a route and its inverse cancel out.
    """
    displacement = ZERO
    rotation = 0.0
    for leg in route:
        if isinstance(leg, Move):
            displacement = displacement + leg.vector
        else:
            rotation += leg.radians
    return displacement, rotation
