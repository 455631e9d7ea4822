"""
Sensor Layer - Hardware interfaces.

- Camera: OpenCV capture with red/blue jewel detection
- Marker readers: which cryptobox column is the key column
- Knockers: jewel arm + color read
"""

from .camera import Camera, ColorBlob
from .marker import ArucoMarkerReader, Marker, MarkerReader
from .knocker import JewelKnocker, Knocker
from .simulated import SimulatedKnocker, SimulatedMarkerReader

__all__ = [
    "Camera",
    "ColorBlob",
    "ArucoMarkerReader",
    "Marker",
    "MarkerReader",
    "JewelKnocker",
    "Knocker",
    "SimulatedKnocker",
    "SimulatedMarkerReader",
]
