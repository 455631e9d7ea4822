"""
Telemetry sink - what the operator sees during a run.

Everything goes to the logger; the most recent lines are also kept in
memory so the web interface can show them.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)


@dataclass
class TelemetryLine:
    """One reported line."""

    timestamp: float
    level: str  # "info", "data", "warning", "fatal"
    label: str
    value: str


class Telemetry:
    """
    Fire-and-forget reporting.

    Usage:
        telemetry = Telemetry()
        telemetry.write("Performing next task", task.name)
        telemetry.data("Task knock_jewel successful?", True)
        telemetry.warning("Instructions to UNKNOWN cryptobox column?!")
    """

    def __init__(self, history: int = 200):
        self._lines: deque[TelemetryLine] = deque(maxlen=history)
        self._lock = threading.Lock()

    def write(self, label: str, value) -> None:
        """Progress message."""
        logger.info(f"{label}: {value}")
        self._add("info", label, value)

    def data(self, label: str, value) -> None:
        """Labelled value (results, config changes)."""
        logger.info(f"[data] {label} = {value}")
        self._add("data", label, value)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self._add("warning", "WARNING", message)

    def fatal(self, label: str, message: str) -> None:
        """Unrecoverable problem; shown with a FATAL marker."""
        logger.critical(f"FATAL {label}: {message}")
        self._add("fatal", "FATAL", f"{label}: {message}")

    def lines(self) -> list[TelemetryLine]:
        with self._lock:
            return list(self._lines)

    def to_list(self) -> list[dict]:
        """Recent lines for JSON API."""
        return [asdict(line) for line in self.lines()]

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def _add(self, level: str, label: str, value) -> None:
        with self._lock:
            self._lines.append(TelemetryLine(time.time(), level, label, str(value)))
