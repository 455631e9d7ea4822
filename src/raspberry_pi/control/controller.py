"""
Autonomous controller - runs one autonomous period.

1. Initializes hardware, navigation and the decision maker
2. Waits for the start signal
3. Takes tasks from the decision maker until all are done or the
   period's time budget is used up
4. Stops the drivetrain and reports every outcome

The budget is only checked between tasks. A task still running when the
period ends is not interrupted; the field stops the robot.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from control.config_mapping import MatchSetup
from control.hardware import Hardware
from decision import DecisionMaker
from mission import MissionState, TaskContext, build_catalog
from navigation import AutoNav, Navigator
from params import MatchConfig, Parameters
from telemetry import Telemetry

logger = logging.getLogger(__name__)


class AutonomousController:
    """
    Main autonomous op-mode.

    Usage:
        controller = AutonomousController(simulate=True)
        state = controller.run()

    ``hardware_factory`` builds the Hardware bundle; it defaults to the
    real robot, or the simulated one when ``simulate`` is set.
    """

    def __init__(
        self,
        params: Parameters | None = None,
        setup: MatchSetup | None = None,
        telemetry: Telemetry | None = None,
        simulate: bool = False,
        hardware_factory: Callable[[Parameters], Hardware] | None = None,
        catalog_factory: Callable[[], tuple] = build_catalog,
    ):
        self.params = params or Parameters.load()
        self.telemetry = telemetry or Telemetry()
        self.setup = setup or MatchSetup(telemetry=self.telemetry)
        if hardware_factory is None:
            hardware_factory = Hardware.simulated if simulate else Hardware.connect
        self.hardware_factory = hardware_factory
        self.catalog_factory = catalog_factory

        self.hardware: Hardware | None = None
        self.navigator: Navigator | None = None
        self.decider: DecisionMaker | None = None
        self.state: MissionState | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def init_all(self, match: MatchConfig | None = None) -> bool:
        """
        Build everything a run needs for ``match`` (default: current setup).

        Any failure is reported with a FATAL marker and no task runs.
        """
        if match is None:
            match = self.setup.current
        try:
            self.hardware = self.hardware_factory(self.params)
            self.navigator = Navigator(
                AutoNav(match, self.hardware.drivetrain, turn_power=self.params.turn_power)
            )
            self.decider = DecisionMaker(
                self.catalog_factory(),
                rank_by_reliability=self.params.rank_by_reliability,
            )
        except Exception as exc:
            self.telemetry.fatal(
                "Initialization failed",
                str(exc) or "for a reason unknown to humankind",
            )
            if self.hardware is not None:
                self.hardware.close()
                self.hardware = None
            return False
        return True

    def run(self, wait_for_start: Callable[[], None] | None = None) -> MissionState | None:
        """
        Run one autonomous period.

        The match configuration is locked before any hardware comes up and
        stays locked until the run has ended.

        Returns:
            The finished MissionState, or None if initialization failed.
        """
        if self._running:
            raise RuntimeError("Autonomous run already active")

        logger.info("Autonomous starting...")
        match = self.setup.lock()
        if not self.init_all(match):
            self.setup.unlock()
            return None

        self._running = True
        try:
            self.state = MissionState(match=match)
            context = TaskContext(
                state=self.state,
                drivetrain=self.hardware.drivetrain,
                navigator=self.navigator,
                marker_reader=self.hardware.marker_reader,
                knocker=self.hardware.knocker,
                telemetry=self.telemetry,
                params=self.params,
            )
            self.telemetry.data("Alliance", match.alliance.name)
            self.telemetry.data("Start position is left", match.starting_left)

            if wait_for_start is not None:
                wait_for_start()
            self._task_loop(context)
        except Exception as exc:
            self.telemetry.fatal("Run aborted", f"{type(exc).__name__}: {exc}")
            raise
        finally:
            try:
                self.hardware.drivetrain.stop()
            finally:
                self.hardware.close()
                self.setup.unlock()
                self._running = False

        self._report()
        return self.state

    def _task_loop(self, context: TaskContext) -> None:
        start = time.monotonic()

        # Take tasks from the decider and execute them
        while not self.decider.is_done:
            elapsed = time.monotonic() - start
            if elapsed >= self.params.run_budget:
                skipped = ", ".join(t.name for t in self.decider.pending)
                self.telemetry.warning(
                    f"Out of time after {elapsed:.1f}s, not attempting: {skipped}"
                )
                break

            task = self.decider.next_task()
            self.telemetry.write("Performing next task", task)
            result = self.decider.do_task(task, context)

            self.telemetry.data(
                f"Task {task} successful?",
                result if result is not None else "there was a problem, so no",
            )

        self.state.completed = self.decider.is_done

    def _report(self) -> None:
        outcomes = self.decider.outcomes
        scored = [o.task for o in outcomes if o.success]
        unsupported = [o.task for o in outcomes if not o.is_supported]
        self.telemetry.data("Tasks scored", ", ".join(scored) or "none")
        if unsupported:
            self.telemetry.data("Tasks not supported yet", ", ".join(unsupported))
        logger.info(
            f"Autonomous finished: {len(scored)}/{len(self.decider.tasks)} tasks scored, "
            f"completed={self.state.completed}"
        )

    def snapshot(self) -> dict:
        """Run status for the web interface."""
        return {
            "running": self._running,
            "match": self.setup.current.to_dict(),
            "mission": self.state.to_dict() if self.state else None,
            "decision": self.decider.snapshot() if self.decider else None,
        }
