"""
Mecanum drivetrain driven through the ESP32.

Relative moves and turns are closed-loop on the ESP32 (encoder targets);
the Pi only sends the target and polls the busy flag.
"""

from __future__ import annotations

import logging

import numpy as np

from comm import ESP32Serial
from drivetrain.base import Drivetrain
from navigation.vector import MotionVector

logger = logging.getLogger(__name__)


class MecanumDrivetrain(Drivetrain):
    """
    Four-wheel mecanum drivetrain.

    Usage:
        link = ESP32Serial()
        link.connect()
        drivetrain = MecanumDrivetrain(link, default_power=0.9)
        drivetrain.move(MotionVector(0, 12))   # 12 inches forward
        drivetrain.turn(math.pi / 2)           # quarter turn CCW
    """

    def __init__(self, link: ESP32Serial, **kwargs):
        super().__init__(**kwargs)
        self.link = link
        self._encoders = (0, 0, 0, 0)

    @property
    def is_busy(self) -> bool:
        status = self.link.query_status()
        self._encoders = status.encoders
        return status.busy

    @property
    def encoders(self) -> tuple[int, int, int, int]:
        """Encoder ticks from the latest status, ordered as MotorPtr."""
        return self._encoders

    def _begin_move(self, vector: MotionVector, power: float) -> None:
        self.link.send_command(f"M:{vector.x:.3f},{vector.y:.3f},{power:.2f}")

    def _begin_turn(self, radians: float, power: float) -> None:
        self.link.send_command(f"T:{radians:.4f},{power:.2f}")

    def _set_wheel_powers(self, powers: np.ndarray) -> None:
        fl, fr, rl, rr = (float(p) for p in powers)
        self.link.send_command(f"W:{fl:.3f},{fr:.3f},{rl:.3f},{rr:.3f}")

    def stop(self) -> None:
        self.link.send_command("X")
        logger.info("Drivetrain stopped")
