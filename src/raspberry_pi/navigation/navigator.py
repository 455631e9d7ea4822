"""
Named waypoints on top of AutoNav.

The navigator remembers which waypoint the robot is parked at. Going
somewhere else first backs out along the inverse of the route that got
it there, so every trip starts from the starting position.
"""

from __future__ import annotations

import logging
from enum import Enum

from navigation.auto_nav import AutoNav
from sensors.marker import Marker

logger = logging.getLogger(__name__)


class Waypoint(Enum):
    """Named targets the robot can be sent to."""

    START = "start"
    JEWEL_KNOCK = "jewel-knock"
    SAFE_ZONE = "safe-zone"
    LOAD_COLUMN_1 = "load-column1"
    LOAD_COLUMN_2 = "load-column2"
    LOAD_COLUMN_3 = "load-column3"


COLUMN_WAYPOINTS = {
    Marker.LEFT: Waypoint.LOAD_COLUMN_1,
    Marker.CENTER: Waypoint.LOAD_COLUMN_2,
    Marker.RIGHT: Waypoint.LOAD_COLUMN_3,
}

WAYPOINT_COLUMNS = {waypoint: marker for marker, waypoint in COLUMN_WAYPOINTS.items()}


def column_waypoint(marker: Marker | None) -> Waypoint:
    """Cryptobox column for a marker. Unknown markers load column 1."""
    if marker is None:
        return Waypoint.LOAD_COLUMN_1
    return COLUMN_WAYPOINTS.get(marker, Waypoint.LOAD_COLUMN_1)


class Navigator:
    """Drives between named waypoints."""

    def __init__(self, nav: AutoNav):
        self.nav = nav
        self.position = Waypoint.START

    def go_to_position(self, waypoint: Waypoint | str) -> None:
        waypoint = Waypoint(waypoint)
        if waypoint is self.position:
            logger.debug(f"Already at {waypoint.value}")
            return

        self.nav._require_drivetrain()
        if self.position is not Waypoint.START:
            logger.info(f"Backing out of {self.position.value}")
            self._leave(self.position)
            self.position = Waypoint.START

        if waypoint is not Waypoint.START:
            logger.info(f"Driving to {waypoint.value}")
            self._reach(waypoint)
            self.position = waypoint

    def return_to_start(self) -> None:
        self.go_to_position(Waypoint.START)

    def _reach(self, waypoint: Waypoint) -> None:
        if waypoint is Waypoint.JEWEL_KNOCK:
            self.nav.begin_jewel_knock()
        elif waypoint is Waypoint.SAFE_ZONE:
            # The cryptobox sits inside the safe zone
            self.nav.go_to_structure()
        else:
            self.nav.go_to_structure(WAYPOINT_COLUMNS[waypoint])

    def _leave(self, waypoint: Waypoint) -> None:
        if waypoint is Waypoint.JEWEL_KNOCK:
            self.nav.end_jewel_knock()
        elif waypoint is Waypoint.SAFE_ZONE:
            self.nav.return_from_structure()
        else:
            self.nav.return_from_structure(WAYPOINT_COLUMNS[waypoint])
