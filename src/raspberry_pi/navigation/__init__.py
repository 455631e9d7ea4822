"""
Navigation Layer - Where to go.

Contains:
- MotionVector: immutable field-relative displacement
- AutoNav: alliance mirroring and cryptobox routes
- Navigator: named waypoints
"""

from .vector import MotionVector, WaypointInstruction
from .route import Move, Turn
from .auto_nav import AutoNav
from .navigator import Navigator, Waypoint, column_waypoint

__all__ = [
    "MotionVector",
    "WaypointInstruction",
    "Move",
    "Turn",
    "AutoNav",
    "Navigator",
    "Waypoint",
    "column_waypoint",
]
