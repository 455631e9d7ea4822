"""
Mission layer - run state and the autonomous task catalog.
"""

from .state import MissionState, TaskContext
from .tasks import build_catalog

__all__ = ["MissionState", "TaskContext", "build_catalog"]
