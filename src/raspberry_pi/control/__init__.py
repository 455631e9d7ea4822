"""
Control Layer - Execution.

Runs the autonomous period and owns the pre-match configuration.
"""

from .config_mapping import ConfigLocked, ConfigRule, MatchSetup, apply_input
from .controller import AutonomousController
from .hardware import Hardware

__all__ = [
    "AutonomousController",
    "ConfigLocked",
    "ConfigRule",
    "Hardware",
    "MatchSetup",
    "apply_input",
]
