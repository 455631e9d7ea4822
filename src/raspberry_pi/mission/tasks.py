"""
Autonomous task catalog.

Four actions score points:
- Knocking off the jewel of the other alliance's color
- Reading the marker that names the key cryptobox column
- Putting the preloaded glyph into that column
- Parking in the safe zone

Each body takes a TaskContext and reports whether it scored.
"""

from __future__ import annotations

import logging

from config import (
    KNOCK_JEWEL_PRIORITY,
    KNOCK_JEWEL_RELIABILITY,
    PARK_PRIORITY,
    PARK_RELIABILITY,
    PLACE_GLYPH_PRIORITY,
    PLACE_GLYPH_RELIABILITY,
    READ_MARKER_PRIORITY,
    READ_MARKER_RELIABILITY,
)
from decision import Task, TaskResult
from mission.state import TaskContext
from navigation.navigator import Waypoint, column_waypoint
from sensors.marker import Marker

logger = logging.getLogger(__name__)


def knock_jewel(ctx: TaskContext) -> bool:
    ctx.navigator.go_to_position(Waypoint.JEWEL_KNOCK)
    knocker = ctx.knocker
    knocker.lower_arm()

    # No clear color means no knock
    color = knocker.detect()
    if color is None:
        knocker.raise_arm()
        return False

    # Knock off the jewel of the color opposite to our alliance
    knocker.act(color is not ctx.state.match.alliance)
    knocker.raise_arm()
    return True


def park_in_safe_zone(ctx: TaskContext) -> bool:
    ctx.navigator.go_to_position(Waypoint.SAFE_ZONE)
    ctx.sleep(ctx.params.park_dwell)
    return True


def read_marker(ctx: TaskContext) -> bool:
    # The marker is visible from the jewel position
    ctx.navigator.go_to_position(Waypoint.JEWEL_KNOCK)

    reader = ctx.marker_reader
    reader.start_tracking()
    try:
        marker = reader.read_marker()
    finally:
        reader.stop_tracking()

    ctx.state.record_marker(marker)
    ctx.telemetry.data("Marker", marker.name)
    return marker is not Marker.UNKNOWN


def place_in_cryptobox(ctx: TaskContext) -> TaskResult:
    marker = ctx.state.marker
    if marker is None or marker is Marker.UNKNOWN:
        ctx.telemetry.warning("Instructions to UNKNOWN cryptobox column?! Using column 1")
    ctx.navigator.go_to_position(column_waypoint(marker))

    # TODO: score the glyph once the new glyph manipulator is built
    return TaskResult.NOT_SUPPORTED


def build_catalog() -> tuple[Task, ...]:
    """Tasks in declaration order; ties on priority keep this order."""
    return (
        Task(
            "knock_jewel",
            priority=KNOCK_JEWEL_PRIORITY,
            reliability=KNOCK_JEWEL_RELIABILITY,
            body=knock_jewel,
        ),
        Task(
            "park_in_safe_zone",
            priority=PARK_PRIORITY,
            reliability=PARK_RELIABILITY,
            body=park_in_safe_zone,
        ),
        Task(
            "read_marker",
            priority=READ_MARKER_PRIORITY,
            reliability=READ_MARKER_RELIABILITY,
            body=read_marker,
        ),
        Task(
            "place_in_cryptobox",
            priority=PLACE_GLYPH_PRIORITY,
            reliability=PLACE_GLYPH_RELIABILITY,
            body=place_in_cryptobox,
            requires=("read_marker",),
        ),
    )
