"""
Jewel knocker - arm servo, flicker servo and color read.

The arm lowers between the two jewels with the camera looking at the
forward one. act(True) flicks that jewel off, act(False) the other.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from config import (
    JEWEL_ARM_DOWN,
    JEWEL_ARM_UP,
    JEWEL_FLICK_BACKWARD,
    JEWEL_FLICK_CENTER,
    JEWEL_FLICK_FORWARD,
)
from params import Alliance

logger = logging.getLogger(__name__)


class Knocker(ABC):
    """Actuator port for the target-strike task."""

    @abstractmethod
    def lower_arm(self) -> None:
        ...

    @abstractmethod
    def raise_arm(self) -> None:
        ...

    @abstractmethod
    def detect(self) -> Alliance | None:
        """Color of the sensed jewel, or None if it cannot be told."""
        ...

    @abstractmethod
    def act(self, opposite_of_alliance: bool) -> None:
        """Knock off the sensed jewel if True, the other one if False."""
        ...


def dominant_color(blobs, min_ratio: float = 1.5) -> Alliance | None:
    """
    Pick red or blue from the blobs in view.

    One color must cover at least ``min_ratio`` times the area of the other,
    otherwise the reading is indeterminate.
    """
    areas = {"red": 0, "blue": 0}
    for blob in blobs:
        if blob.color in areas:
            areas[blob.color] += blob.area

    red, blue = areas["red"], areas["blue"]
    if red == 0 and blue == 0:
        return None
    if red >= blue * min_ratio:
        return Alliance.RED
    if blue >= red * min_ratio:
        return Alliance.BLUE
    return None


class JewelKnocker(Knocker):
    """Servo-driven knocker on the ESP32, color from the camera."""

    def __init__(self, link, camera, settle_time: float = 0.4):
        self.link = link
        self.camera = camera
        self.settle_time = settle_time

    def lower_arm(self) -> None:
        self.link.send_command(f"K:{JEWEL_ARM_DOWN}")
        time.sleep(self.settle_time)

    def raise_arm(self) -> None:
        self.link.send_command(f"J:{JEWEL_FLICK_CENTER}")
        self.link.send_command(f"K:{JEWEL_ARM_UP}")
        time.sleep(self.settle_time)

    def detect(self) -> Alliance | None:
        color = dominant_color(self.camera.get_blobs())
        logger.info(f"Jewel color: {color.name if color else 'indeterminate'}")
        return color

    def act(self, opposite_of_alliance: bool) -> None:
        position = JEWEL_FLICK_FORWARD if opposite_of_alliance else JEWEL_FLICK_BACKWARD
        self.link.send_command(f"J:{position}")
        time.sleep(self.settle_time)
