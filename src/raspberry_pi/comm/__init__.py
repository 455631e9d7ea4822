"""
Communication layer - serial protocol with ESP32.
"""

from .esp32_serial import DriveStatus, ESP32Error, ESP32Serial

__all__ = ["DriveStatus", "ESP32Error", "ESP32Serial"]
