"""
Motion vectors - field-relative displacement intents.

Directions follow the usual maths convention with the robot at the
origin facing +y:

    forward = (0, 1)    right = (1, 0)    back-left = (-1, -1)

Vectors carry scale, so (0, 12) means "12 inches forward". Rotations are
kept separately as signed radians (positive = counter-clockwise).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class MotionVector:
    """Immutable 2-D displacement (x = lateral, y = forward)."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def of(cls, pair) -> MotionVector:
        """Build from an (x, y) tuple or array."""
        x, y = pair
        return cls(float(x), float(y))

    def negate(self) -> MotionVector:
        return MotionVector(-self.x, -self.y)

    def mirrored(self) -> MotionVector:
        """Reflect across the x axis."""
        # Field offsets are measured with y across the alliance mirror line
        return MotionVector(self.x, -self.y)

    def rotated(self, radians: float) -> MotionVector:
        c, s = math.cos(radians), math.sin(radians)
        return MotionVector(self.x * c - self.y * s, self.x * s + self.y * c)

    @property
    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def __add__(self, other: MotionVector) -> MotionVector:
        return MotionVector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: MotionVector) -> MotionVector:
        return MotionVector(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> MotionVector:
        return MotionVector(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __neg__(self) -> MotionVector:
        return self.negate()

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f})"


ZERO = MotionVector()

# Unit directions
LEFT = MotionVector(-1.0, 0.0)
RIGHT = MotionVector(1.0, 0.0)


@dataclass(frozen=True)
class WaypointInstruction:
    """A movement followed by a rotation, derived per call."""

    movement: MotionVector
    rotation: float  # radians
