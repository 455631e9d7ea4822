"""
Web Layer - Pit-side setup and debug interface.

Provides:
- Match setup (alliance, starting side)
- Run start and live mission status
- Telemetry log
- Parameter tuning
- Camera view (MJPEG stream)

NOTE: Must be OFF during the match (no wireless control during autonomous).
"""

from .server import create_app, run_server

__all__ = ["create_app", "run_server"]
