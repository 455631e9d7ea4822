#!/usr/bin/env python3
"""
Autonomous Main - Entry Point

Usage:
    python main.py --alliance red --start left     # Run autonomous on the robot
    python main.py --simulate --marker right       # Dry run, no hardware
    python main.py --web                           # Pit interface, start runs from the browser
"""

import argparse
import asyncio
import logging
import sys

from params import Alliance, MatchConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Autonomous Robot Controller")
    parser.add_argument(
        "--alliance",
        default="red",
        choices=["red", "blue"],
        help="Alliance color for this match",
    )
    parser.add_argument(
        "--start",
        default="left",
        choices=["left", "right"],
        help="Starting balancing stone, seen from the alliance wall",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Use simulated drivetrain and sensors",
    )
    parser.add_argument(
        "--marker",
        default="center",
        choices=["left", "center", "right", "unknown"],
        help="Marker the simulated reader sees",
    )
    parser.add_argument(
        "--jewel",
        default="blue",
        choices=["red", "blue", "none"],
        help="Jewel color the simulated knocker sees",
    )
    parser.add_argument(
        "--web",
        action="store_true",
        help="Enable web interface for setup and debugging",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Autonomous robot starting...")

    from control import AutonomousController, Hardware, MatchSetup
    from params import Parameters
    from sensors import Marker
    from telemetry import Telemetry

    params = Parameters.load()
    telemetry = Telemetry()
    setup = MatchSetup(
        MatchConfig(Alliance(args.alliance), starting_left=args.start == "left"),
        telemetry=telemetry,
    )

    hardware_factory = None
    if args.simulate:
        marker = Marker(args.marker)
        jewel = None if args.jewel == "none" else Alliance(args.jewel)
        inches_per_second = 24.0 if args.web else 0.0

        def hardware_factory(p):
            return Hardware.simulated(p, marker, jewel, inches_per_second)

    controller = AutonomousController(
        params=params,
        setup=setup,
        telemetry=telemetry,
        hardware_factory=hardware_factory,
    )

    if args.web:
        from web.server import run_server

        async def run_web():
            runner = await run_server(controller)
            logger.info("Press Ctrl+C to stop")
            try:
                while True:
                    await asyncio.sleep(1)
            except asyncio.CancelledError:
                pass
            finally:
                await runner.cleanup()

        try:
            asyncio.run(run_web())
        except KeyboardInterrupt:
            logger.info("Shutdown requested")
        return 0

    state = controller.run()
    if state is None:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
