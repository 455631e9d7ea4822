"""
Drivetrain Layer - How the robot moves.

- Drivetrain: blocking move/turn interface every task drives through
- MecanumDrivetrain: ESP32-backed hardware implementation
- SimulatedDrivetrain: recording implementation for dry runs
"""

from .base import Drivetrain, DrivetrainTimeout, MotorPtr, mecanum_powers
from .mecanum import MecanumDrivetrain
from .simulated import SimulatedDrivetrain

__all__ = [
    "Drivetrain",
    "DrivetrainTimeout",
    "MotorPtr",
    "mecanum_powers",
    "MecanumDrivetrain",
    "SimulatedDrivetrain",
]
