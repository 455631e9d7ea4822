"""
Simulated drivetrain for dry runs and tests.

Records every command and integrates a field pose, so a run can be
checked without motors attached.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass

import numpy as np

from config import TRACK_HALF_WIDTH, WHEELBASE_HALF_LENGTH
from drivetrain.base import Drivetrain
from navigation.vector import MotionVector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """One recorded drivetrain call."""

    kind: str  # "move", "turn", "wheels", "stop"
    vector: MotionVector | None = None
    radians: float = 0.0
    power: float = 0.0
    wheels: tuple[float, ...] = ()


class SimulatedDrivetrain(Drivetrain):
    """
    In-memory drivetrain.

    Pose is tracked in the starting frame: position in inches, heading in
    radians (CCW positive). ``inches_per_second`` > 0 makes blocking calls
    take roughly real time, useful when watching a dry run.
    """

    def __init__(self, inches_per_second: float = 0.0, **kwargs):
        super().__init__(**kwargs)
        self.inches_per_second = inches_per_second
        self.commands: list[Command] = []
        self.position = np.zeros(2)
        self.heading = 0.0
        self.wheel_powers = np.zeros(4)

    @property
    def is_busy(self) -> bool:
        return False

    @property
    def moves(self) -> list[Command]:
        return [c for c in self.commands if c.kind in ("move", "turn")]

    def _begin_move(self, vector: MotionVector, power: float) -> None:
        self.commands.append(Command("move", vector=vector, power=power))
        self.position = self.position + vector.rotated(self.heading).as_array()
        self._pause(vector.norm / power)

    def _begin_turn(self, radians: float, power: float) -> None:
        self.commands.append(Command("turn", radians=radians, power=power))
        self.heading = math.remainder(self.heading + radians, 2 * math.pi)
        # Arc length travelled by a wheel
        radius = math.hypot(TRACK_HALF_WIDTH, WHEELBASE_HALF_LENGTH)
        self._pause(abs(radians) * radius / power)

    def _set_wheel_powers(self, powers: np.ndarray) -> None:
        self.wheel_powers = np.asarray(powers, dtype=float)
        self.commands.append(Command("wheels", wheels=tuple(float(p) for p in powers)))

    def stop(self) -> None:
        self.wheel_powers = np.zeros(4)
        self.commands.append(Command("stop"))

    def _pause(self, distance: float) -> None:
        if self.inches_per_second > 0:
            time.sleep(distance / self.inches_per_second)
