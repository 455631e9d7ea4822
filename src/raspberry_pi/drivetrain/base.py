"""
Drivetrain interface.

Directions are vectors with the robot at the origin facing +y (see
navigation.vector). move() and turn() are blocking: they wait for the
motors to go idle before and after issuing the command, which is what the
autonomous tasks rely on. start_move(), start_turn() and actuate() set
continuous wheel powers and return immediately.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

from navigation.vector import MotionVector

logger = logging.getLogger(__name__)


class MotorPtr(Enum):
    """Wheel positions, in the order wheel power arrays use."""

    FRONT_LEFT = 0
    FRONT_RIGHT = 1
    REAR_LEFT = 2
    REAR_RIGHT = 3

    @property
    def is_front(self) -> bool:
        return self in (MotorPtr.FRONT_LEFT, MotorPtr.FRONT_RIGHT)

    @property
    def is_left(self) -> bool:
        return self in (MotorPtr.FRONT_LEFT, MotorPtr.REAR_LEFT)


class DrivetrainTimeout(RuntimeError):
    """Motors stayed busy longer than allowed."""


def mecanum_powers(
    movement: MotionVector,
    power: float,
    turn_clockwise: bool = False,
    turn_power: float = 0.0,
) -> np.ndarray:
    """
    Mix a movement direction and a rotation into four wheel powers.

    The movement vector only gives the direction; its length is replaced by
    ``power``. If any wheel would exceed 1 all four are scaled down
    together, so a large turn_power can slow the translation.

    Returns:
        Array of powers ordered as MotorPtr.
    """
    direction = movement.as_array()
    length = np.linalg.norm(direction)
    if length > 0:
        direction = direction / length * power
    x, y = direction
    rot = turn_power if turn_clockwise else -turn_power

    powers = np.array([
        y + x + rot,  # front left
        y - x - rot,  # front right
        y - x + rot,  # rear left
        y + x - rot,  # rear right
    ])
    peak = np.max(np.abs(powers))
    if peak > 1.0:
        powers = powers / peak
    return powers


def check_power(power: float) -> float:
    if not 0.0 < power <= 1.0:
        raise ValueError(f"Power must be in (0, 1], got {power}")
    return power


class Drivetrain(ABC):
    """
    Base class for drivetrains.

    Subclasses implement the hardware side: starting a relative move or
    turn, setting raw wheel powers, the busy query and stopping.
    """

    def __init__(
        self,
        default_power: float = 0.9,
        precise_power_factor: float = 0.4,
        poll_interval: float = 0.01,
        busy_timeout: float | None = None,
    ):
        self._default_power = check_power(default_power)
        self.precise_power_factor = precise_power_factor
        self.poll_interval = poll_interval
        self.busy_timeout = busy_timeout
        self.is_using_precise_power = False

    @property
    def default_power(self) -> float:
        return self._default_power

    @property
    @abstractmethod
    def is_busy(self) -> bool:
        """True while any drivetrain motor is still running a command."""
        ...

    @abstractmethod
    def _begin_move(self, vector: MotionVector, power: float) -> None:
        ...

    @abstractmethod
    def _begin_turn(self, radians: float, power: float) -> None:
        ...

    @abstractmethod
    def _set_wheel_powers(self, powers: np.ndarray) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        """Set every wheel power to zero."""
        ...

    def move(self, vector: MotionVector, power: float | None = None) -> None:
        """Move by ``vector`` (inches) and block until the motors are idle."""
        power = check_power(self._default_power if power is None else power)
        if vector.is_zero:
            return
        self.wait_until_idle()
        logger.debug(f"move {vector} @ {power:.2f}")
        self._begin_move(vector, power)
        self.wait_until_idle()

    def turn(self, radians: float, power: float | None = None) -> None:
        """Rotate in place (CCW positive) and block until the motors are idle."""
        power = check_power(self._default_power if power is None else power)
        if abs(radians) > 2 * np.pi:
            raise ValueError(f"Turn must be within [-2pi, 2pi], got {radians}")
        if radians == 0.0:
            return
        self.wait_until_idle()
        logger.debug(f"turn {np.degrees(radians):.1f} deg @ {power:.2f}")
        self._begin_turn(radians, power)
        self.wait_until_idle()

    def start_move(self, direction: MotionVector, power: float | None = None) -> None:
        power = check_power(self._default_power if power is None else power)
        self._set_wheel_powers(mecanum_powers(direction, self._scaled(power)))

    def start_turn(self, power: float) -> None:
        """Spin in place; positive power turns counter-clockwise."""
        if not -1.0 <= power <= 1.0:
            raise ValueError(f"Turn power must be in [-1, 1], got {power}")
        self._set_wheel_powers(
            mecanum_powers(MotionVector(), 0.0, power < 0, self._scaled(abs(power)))
        )

    def actuate(
        self,
        movement: MotionVector,
        power: float,
        turn_clockwise: bool,
        turn_power: float,
    ) -> None:
        """Move and turn at the same time."""
        check_power(power)
        check_power(turn_power)
        self._set_wheel_powers(
            mecanum_powers(movement, power, turn_clockwise, turn_power)
        )

    def wait_until_idle(self) -> None:
        start = time.monotonic()
        while self.is_busy:
            if self.busy_timeout is not None and time.monotonic() - start > self.busy_timeout:
                self.stop()
                raise DrivetrainTimeout(
                    f"Drivetrain still busy after {self.busy_timeout:.1f}s"
                )
            time.sleep(self.poll_interval)

    def _scaled(self, power: float) -> float:
        if self.is_using_precise_power:
            return power * self.precise_power_factor
        return power
