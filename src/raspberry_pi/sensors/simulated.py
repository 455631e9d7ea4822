"""
Scripted sensor ports for dry runs and tests.
"""

from __future__ import annotations

import logging

from params import Alliance
from sensors.knocker import Knocker
from sensors.marker import Marker, MarkerReader

logger = logging.getLogger(__name__)


class SimulatedMarkerReader(MarkerReader):
    """Always reads the same marker."""

    def __init__(self, marker: Marker = Marker.CENTER):
        self.marker = marker
        self.tracking = False
        self.reads = 0

    def start_tracking(self) -> None:
        self.tracking = True

    def stop_tracking(self) -> None:
        self.tracking = False

    def read_marker(self) -> Marker:
        if not self.tracking:
            raise RuntimeError("read_marker() called before start_tracking()")
        self.reads += 1
        return self.marker


class SimulatedKnocker(Knocker):
    """Knocker that senses a fixed jewel color and logs what it does."""

    def __init__(self, color: Alliance | None = Alliance.BLUE):
        self.color = color
        self.arm_down = False
        self.actions: list[str] = []

    def lower_arm(self) -> None:
        self.arm_down = True
        self.actions.append("lower")

    def raise_arm(self) -> None:
        self.arm_down = False
        self.actions.append("raise")

    def detect(self) -> Alliance | None:
        return self.color

    def act(self, opposite_of_alliance: bool) -> None:
        side = "sensed" if opposite_of_alliance else "other"
        logger.info(f"Knocking the {side} jewel")
        self.actions.append(f"knock-{side}")
