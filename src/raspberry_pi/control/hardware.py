"""
Hardware bundle - the ports a run drives.

Hardware.connect() brings up the real robot; Hardware.simulated() gives
recording stand-ins with the same interfaces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from comm import ESP32Serial
from drivetrain import Drivetrain, MecanumDrivetrain, SimulatedDrivetrain
from params import Alliance, Parameters
from sensors import (
    ArucoMarkerReader,
    Camera,
    JewelKnocker,
    Knocker,
    Marker,
    MarkerReader,
    SimulatedKnocker,
    SimulatedMarkerReader,
)

logger = logging.getLogger(__name__)


@dataclass
class Hardware:
    drivetrain: Drivetrain
    marker_reader: MarkerReader
    knocker: Knocker
    camera: Camera | None = None
    link: ESP32Serial | None = None

    @classmethod
    def connect(cls, params: Parameters) -> Hardware:
        """Bring up the ESP32 link and camera. Raises on any failure."""
        logger.info("Initializing hardware...")

        link = ESP32Serial()
        if not link.connect():
            raise RuntimeError("Failed to connect to motor controller")

        camera = Camera(params=params)
        if not camera.start():
            link.disconnect()
            raise RuntimeError("Failed to start camera")

        drivetrain = MecanumDrivetrain(
            link,
            default_power=params.default_power,
            precise_power_factor=params.precise_power_factor,
            poll_interval=params.busy_poll_interval,
        )
        logger.info("Hardware initialized")
        return cls(
            drivetrain=drivetrain,
            marker_reader=ArucoMarkerReader(camera, params),
            knocker=JewelKnocker(link, camera),
            camera=camera,
            link=link,
        )

    @classmethod
    def simulated(
        cls,
        params: Parameters,
        marker: Marker = Marker.CENTER,
        jewel: Alliance | None = Alliance.BLUE,
        inches_per_second: float = 0.0,
    ) -> Hardware:
        logger.info("Using simulated hardware")
        drivetrain = SimulatedDrivetrain(
            inches_per_second=inches_per_second,
            default_power=params.default_power,
            precise_power_factor=params.precise_power_factor,
        )
        return cls(
            drivetrain=drivetrain,
            marker_reader=SimulatedMarkerReader(marker),
            knocker=SimulatedKnocker(jewel),
        )

    def close(self) -> None:
        """Stop and release everything. Safe to call more than once."""
        logger.info("Cleaning up...")
        if self.link and self.link.is_connected:
            self.link.disconnect()
        if self.camera and self.camera.is_running:
            self.camera.stop()
        logger.info("Cleanup complete")
