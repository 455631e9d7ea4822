"""
Runtime tunable parameters with JSON persistence, plus the match setup.

Parameters can be tuned from the web interface between runs.
MatchConfig is the alliance / starting side for one match; it is an
immutable value handed to the mission at construction and only replaced
between runs.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from enum import Enum
from pathlib import Path

from config import AUTONOMOUS_PERIOD, MOTOR_POWER

logger = logging.getLogger(__name__)

PARAMS_FILE = Path(__file__).parent / "params.json"


class Alliance(Enum):
    """Alliance color, fixed per match."""

    RED = "red"
    BLUE = "blue"

    @property
    def opposite(self) -> Alliance:
        return Alliance.BLUE if self is Alliance.RED else Alliance.RED


@dataclass(frozen=True)
class MatchConfig:
    """Match setup read by the mission. Never mutated during a run."""

    alliance: Alliance = Alliance.RED
    starting_left: bool = True

    def with_alliance(self, alliance: Alliance) -> MatchConfig:
        return replace(self, alliance=alliance)

    def toggled_alliance(self) -> MatchConfig:
        return replace(self, alliance=self.alliance.opposite)

    def with_starting_left(self, starting_left: bool) -> MatchConfig:
        return replace(self, starting_left=starting_left)

    def toggled_start(self) -> MatchConfig:
        return replace(self, starting_left=not self.starting_left)

    def to_dict(self) -> dict:
        return {"alliance": self.alliance.value, "starting_left": self.starting_left}


@dataclass
class Parameters:
    """Runtime tunable parameters."""

    # Drivetrain
    default_power: float = MOTOR_POWER
    precise_power_factor: float = 0.4  # Applied to start_move/start_turn when precise
    turn_power: float = 0.6
    busy_poll_interval: float = 0.01  # seconds between is_busy checks

    # Jewel (red/blue) HSV ranges
    red_h_min1: int = 0
    red_h_max1: int = 10
    red_h_min2: int = 160
    red_h_max2: int = 180
    red_s_min: int = 100
    red_v_min: int = 80
    blue_h_min: int = 100
    blue_h_max: int = 130
    blue_s_min: int = 100
    blue_v_min: int = 60
    min_contour_area: int = 400

    # Marker (ArUco 4x4 ids standing in for the three pictographs)
    marker_left_id: int = 1
    marker_center_id: int = 2
    marker_right_id: int = 3
    marker_timeout: float = 2.0  # seconds to look before giving up

    # Mission
    park_dwell: float = 1.0  # seconds to wait in the safe zone
    run_budget: float = AUTONOMOUS_PERIOD
    rank_by_reliability: bool = False  # Secondary tie-break after priority

    def update(self, **kwargs):
        """Update parameters from dict (e.g., from web API)."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                expected_type = type(getattr(self, key))
                try:
                    if expected_type is bool and isinstance(value, str):
                        value = value.lower() in ("1", "true", "yes", "on")
                    setattr(self, key, expected_type(value))
                except (TypeError, ValueError):
                    logger.warning(f"Invalid value for {key}: {value}")

    def save(self):
        """Persist to JSON file."""
        with open(PARAMS_FILE, "w") as f:
            json.dump(asdict(self), f, indent=2)
        logger.info(f"Parameters saved to {PARAMS_FILE}")

    @classmethod
    def load(cls) -> Parameters:
        """Load from JSON file, or return defaults."""
        if PARAMS_FILE.exists():
            try:
                with open(PARAMS_FILE) as f:
                    data = json.load(f)
                params = cls()
                params.update(**data)
                logger.info(f"Parameters loaded from {PARAMS_FILE}")
                return params
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load {PARAMS_FILE}: {e}, using defaults")
        return cls()

    def to_dict(self) -> dict:
        """Convert to dict for JSON API."""
        return asdict(self)
