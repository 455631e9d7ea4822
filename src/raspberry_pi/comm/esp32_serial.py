"""
Serial communication with the ESP32 motor board.

Request / response line protocol. Every command is answered with a single
line before the next one is sent:

    Commands (Pi -> ESP32):
        M:<x>,<y>,<power>\\n        - relative move (inches, robot frame)
        T:<radians>,<power>\\n      - relative turn (CCW positive)
        W:<fl>,<fr>,<rl>,<rr>\\n    - raw wheel powers, -1..1
        K:<deg>\\n                  - jewel arm servo
        J:<deg>\\n                  - jewel flicker servo
        Q\\n                        - status query
        X\\n                        - stop wheels
        E\\n                        - emergency stop (no reply)

    Replies (ESP32 -> Pi):
        OK\\n
        S:<busy>,<fl>,<fr>,<rl>,<rr>\\n   - busy flag + encoder ticks
        E:<error_code>\\n
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import serial

from config import ESP32_BAUDRATE, ESP32_PORT

logger = logging.getLogger(__name__)


class ESP32Error(RuntimeError):
    """ESP32 reported an error or did not answer."""


@dataclass
class DriveStatus:
    """Parsed status reply."""

    busy: bool
    encoders: tuple[int, int, int, int]

    @classmethod
    def parse(cls, line: str) -> DriveStatus:
        if not line.startswith("S:"):
            raise ESP32Error(f"Expected status, got {line!r}")
        parts = line[2:].split(",")
        if len(parts) != 5:
            raise ESP32Error(f"Malformed status: {line!r}")
        try:
            values = [int(p) for p in parts]
        except ValueError as e:
            raise ESP32Error(f"Malformed status: {line!r}") from e
        return cls(busy=values[0] != 0, encoders=tuple(values[1:]))


class ESP32Serial:
    """Serial link to the ESP32 motor controller."""

    def __init__(
        self,
        port: str = ESP32_PORT,
        baudrate: int = ESP32_BAUDRATE,
        reply_timeout: float = 0.5,
    ):
        self.port = port
        self.baudrate = baudrate
        self.reply_timeout = reply_timeout
        self._serial: serial.Serial | None = None

    @property
    def is_connected(self) -> bool:
        return self._serial is not None

    def connect(self) -> bool:
        """Open serial connection to ESP32."""
        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                timeout=0.05,
            )
            self._serial.reset_input_buffer()
            logger.info(f"Connected to ESP32 on {self.port}")
            return True
        except serial.SerialException as e:
            logger.error(f"Failed to connect to ESP32: {e}")
            self._serial = None
            return False

    def disconnect(self):
        """Close serial connection."""
        if self._serial:
            self.emergency_stop()
            self._serial.close()
            self._serial = None
        logger.info("Disconnected from ESP32")

    def send_command(self, command: str) -> None:
        """Send a command and wait for OK."""
        reply = self._request(command)
        if reply != "OK":
            raise ESP32Error(f"Unexpected reply to {command!r}: {reply!r}")

    def query_status(self) -> DriveStatus:
        return DriveStatus.parse(self._request("Q"))

    def emergency_stop(self):
        """Emergency stop - sends E command."""
        if self._serial:
            self._serial.write(b"E\n")
            logger.warning("EMERGENCY STOP")

    def _request(self, command: str) -> str:
        if not self._serial:
            raise ESP32Error("Not connected to ESP32")

        self._serial.write(f"{command}\n".encode())
        logger.debug(f"Sent: {command}")

        deadline = time.monotonic() + self.reply_timeout
        while time.monotonic() < deadline:
            line = self._serial.readline().decode(errors="ignore").strip()
            if not line:
                continue
            if line.startswith("E:"):
                raise ESP32Error(f"ESP32 error {line[2:]} after {command!r}")
            return line
        raise ESP32Error(f"No reply to {command!r} within {self.reply_timeout}s")

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
