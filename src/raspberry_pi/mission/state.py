"""
Mission state - what one autonomous run knows.

Created at run start, dropped at run end, never persisted.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from params import MatchConfig, Parameters
from sensors.marker import Marker


@dataclass
class MissionState:
    """Shared run state. Written only by the task that is running."""

    match: MatchConfig
    marker: Marker | None = None  # Set once by the marker-read task
    completed: bool = False

    def record_marker(self, marker: Marker) -> None:
        if self.marker is not None:
            raise RuntimeError(f"Marker already recorded as {self.marker.name}")
        self.marker = marker

    def to_dict(self) -> dict:
        return {
            **self.match.to_dict(),
            "marker": self.marker.name if self.marker else None,
            "completed": self.completed,
        }


@dataclass
class TaskContext:
    """Everything a task body may touch."""

    state: MissionState
    drivetrain: object  # drivetrain.Drivetrain
    navigator: object  # navigation.Navigator
    marker_reader: object  # sensors.MarkerReader
    knocker: object  # sensors.Knocker
    telemetry: object  # telemetry.Telemetry
    params: Parameters = field(default_factory=Parameters)
    sleep: Callable[[float], None] = time.sleep
