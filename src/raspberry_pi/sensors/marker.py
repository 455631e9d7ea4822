"""
Marker detection - which cryptobox column is the key column.

The pictograph beside the jewels is stood in for by an ArUco tag. Each of
three tag ids selects a column; anything else reads as UNKNOWN.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class Marker(Enum):
    """Detected marker value (also used as the column selector)."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    UNKNOWN = "unknown"


class MarkerReader(ABC):
    """Detection port used by the marker-read task."""

    @abstractmethod
    def start_tracking(self) -> None:
        ...

    @abstractmethod
    def stop_tracking(self) -> None:
        ...

    @abstractmethod
    def read_marker(self) -> Marker:
        """Return the visible marker, or Marker.UNKNOWN."""
        ...


def marker_from_ids(ids, params) -> Marker:
    """Map detected tag ids to a marker. First known id wins."""
    if ids is None:
        return Marker.UNKNOWN
    table = {
        params.marker_left_id: Marker.LEFT,
        params.marker_center_id: Marker.CENTER,
        params.marker_right_id: Marker.RIGHT,
    }
    for tag_id in np.asarray(ids).flatten():
        marker = table.get(int(tag_id))
        if marker is not None:
            return marker
    return Marker.UNKNOWN


class ArucoMarkerReader(MarkerReader):
    """
    Reads the marker from camera frames.

    read_marker() keeps looking at new frames until a known tag is seen or
    params.marker_timeout runs out.
    """

    def __init__(self, camera, params):
        self.camera = camera
        self.params = params
        self._detector: cv2.aruco.ArucoDetector | None = None

    @property
    def is_tracking(self) -> bool:
        return self._detector is not None

    def start_tracking(self) -> None:
        dictionary = cv2.aruco.getPredefinedDictionary(cv2.aruco.DICT_4X4_50)
        self._detector = cv2.aruco.ArucoDetector(dictionary, cv2.aruco.DetectorParameters())
        logger.info("Marker tracking started")

    def stop_tracking(self) -> None:
        self._detector = None
        logger.info("Marker tracking stopped")

    def read_marker(self) -> Marker:
        if self._detector is None:
            raise RuntimeError("read_marker() called before start_tracking()")

        deadline = time.monotonic() + self.params.marker_timeout
        last_stamp = None
        while time.monotonic() < deadline:
            stamp = self.camera.get_timestamp()
            if stamp == last_stamp:
                time.sleep(0.01)
                continue
            last_stamp = stamp

            frame = self.camera.get_frame()
            if frame is None:
                continue
            gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
            _, ids, _ = self._detector.detectMarkers(gray)
            marker = marker_from_ids(ids, self.params)
            if marker is not Marker.UNKNOWN:
                logger.info(f"Marker read: {marker.name}")
                return marker

        logger.warning(f"No marker within {self.params.marker_timeout}s")
        return Marker.UNKNOWN
