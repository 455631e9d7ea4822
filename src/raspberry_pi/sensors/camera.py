"""
Camera sensor - OpenCV capture with jewel color detection.

Detects colored blobs:
- Red jewels
- Blue jewels

The latest frame is also kept for the marker reader and the web stream.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

import cv2
import numpy as np

from config import CAMERA_FOV, CAMERA_HEIGHT, CAMERA_INDEX, CAMERA_WIDTH

logger = logging.getLogger(__name__)

BOX_COLORS = {
    "red": (0, 0, 255),
    "blue": (255, 0, 0),
}


@dataclass
class ColorBlob:
    """Detected colored region."""

    color: str  # "red" or "blue"
    angle: float  # Degrees from center
    x: int  # Pixel x (center)
    y: int  # Pixel y (center)
    width: int
    height: int
    area: int


def hsv_ranges(params) -> dict[str, list[tuple[np.ndarray, np.ndarray]]]:
    """(lower, upper) HSV bounds per color. Red wraps around hue, so two ranges."""
    p = params
    return {
        "red": [
            (np.array([p.red_h_min1, p.red_s_min, p.red_v_min]),
             np.array([p.red_h_max1, 255, 255])),
            (np.array([p.red_h_min2, p.red_s_min, p.red_v_min]),
             np.array([p.red_h_max2, 255, 255])),
        ],
        "blue": [
            (np.array([p.blue_h_min, p.blue_s_min, p.blue_v_min]),
             np.array([p.blue_h_max, 255, 255])),
        ],
    }


def color_mask(frame: np.ndarray, ranges: list[tuple[np.ndarray, np.ndarray]]) -> np.ndarray:
    hsv = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
    mask = np.zeros(hsv.shape[:2], dtype=np.uint8)
    for lower, upper in ranges:
        mask = cv2.bitwise_or(mask, cv2.inRange(hsv, lower, upper))
    return mask


def find_blobs(
    frame: np.ndarray,
    params,
    fov: float = CAMERA_FOV,
) -> list[ColorBlob]:
    """Detect red and blue blobs in a BGR frame."""
    height, width = frame.shape[:2]
    kernel = np.ones((5, 5), np.uint8)
    blobs = []

    for color, ranges in hsv_ranges(params).items():
        mask = color_mask(frame, ranges)
        mask = cv2.erode(mask, kernel, iterations=1)
        mask = cv2.dilate(mask, kernel, iterations=2)
        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        for contour in contours:
            area = cv2.contourArea(contour)
            if area < params.min_contour_area:
                continue
            x, y, w, h = cv2.boundingRect(contour)
            center_x = x + w // 2
            normalized = (center_x - width / 2) / (width / 2)
            blobs.append(
                ColorBlob(
                    color=color,
                    angle=normalized * (fov / 2),
                    x=center_x,
                    y=y + h // 2,
                    width=w,
                    height=h,
                    area=int(area),
                )
            )

    return blobs


class Camera:
    """
    Camera with background capture and color detection.

    Usage:
        params = Parameters.load()
        camera = Camera(params=params)
        camera.start()

        frame = camera.get_frame()
        blobs = camera.get_blobs()

        camera.stop()
    """

    def __init__(
        self,
        params,
        index: int = CAMERA_INDEX,
        width: int = CAMERA_WIDTH,
        height: int = CAMERA_HEIGHT,
        fov: float = CAMERA_FOV,
    ):
        self.params = params
        self.index = index
        self.width = width
        self.height = height
        self.fov = fov

        self._cap: cv2.VideoCapture | None = None
        self._running = False
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

        # Latest detection results
        self._blobs: list[ColorBlob] = []
        self._frame: np.ndarray | None = None
        self._timestamp: float = 0.0

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> bool:
        """Start camera capture in background thread."""
        if self._running:
            logger.warning("Camera already running")
            return True

        self._cap = cv2.VideoCapture(self.index)
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        if not self._cap.isOpened():
            logger.error("Failed to open camera")
            self._cap = None
            return False

        logger.info(f"Camera started: {self.width}x{self.height}")
        self._running = True
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()
        return True

    def stop(self):
        """Stop camera capture."""
        self._running = False

        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None

        if self._cap:
            self._cap.release()
            self._cap = None

        logger.info("Camera stopped")

    def get_blobs(self) -> list[ColorBlob]:
        """Get latest detected color blobs."""
        with self._lock:
            return self._blobs.copy()

    def get_frame(self) -> np.ndarray | None:
        """Get latest camera frame (BGR format)."""
        with self._lock:
            if self._frame is not None:
                return self._frame.copy()
            return None

    def get_timestamp(self) -> float:
        """Get timestamp of latest frame."""
        with self._lock:
            return self._timestamp

    def get_jpeg_frame(self, draw_boxes: bool = True, quality: int = 80) -> bytes | None:
        """Latest frame as JPEG bytes, optionally with blob boxes drawn."""
        with self._lock:
            if self._frame is None:
                return None
            frame = self._frame.copy()
            blobs = self._blobs.copy()

        if draw_boxes:
            for blob in blobs:
                bgr = BOX_COLORS.get(blob.color, (255, 255, 255))
                x = blob.x - blob.width // 2
                y = blob.y - blob.height // 2
                cv2.rectangle(frame, (x, y), (x + blob.width, y + blob.height), bgr, 2)

        ret, jpeg = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
        if not ret:
            return None
        return jpeg.tobytes()

    def _capture_loop(self):
        """Background capture and detection thread."""
        while self._running:
            try:
                ret, frame = self._cap.read()
                if not ret:
                    continue

                blobs = find_blobs(frame, self.params, self.fov)

                with self._lock:
                    self._blobs = blobs
                    self._frame = frame
                    self._timestamp = time.time()

                # Yield CPU to the mission thread and web server
                time.sleep(0.005)

            except cv2.error as e:
                if self._running:
                    logger.error(f"Camera capture error: {e}")

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
