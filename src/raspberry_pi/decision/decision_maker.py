"""
Decision maker - picks, runs and retires autonomous tasks.

Every task starts pending and is run at most once. Among the tasks whose
prerequisites are resolved, the one with the highest priority goes next;
ties fall back to catalog order (optionally to reliability first).

Per-task status is one of:
- Ready: pending, may be selected
- WaitingOn(name): pending, a prerequisite has not run yet
- Done(outcome): attempted, never selected again

A task body returns True / False, a TaskResult, or None when it could not
tell. Exceptions from a body are not caught here: they abort the run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Union

logger = logging.getLogger(__name__)


class TaskResult(Enum):
    """How an attempted task ended."""

    SUCCESS = "success"
    FAILURE = "failure"
    NOT_SUPPORTED = "not_supported"  # Deliberately not implemented yet

    @classmethod
    def from_body(cls, value) -> TaskResult | None:
        if value is None:
            return None
        if isinstance(value, TaskResult):
            return value
        if isinstance(value, bool):
            return cls.SUCCESS if value else cls.FAILURE
        raise TypeError(f"Task body returned {value!r}, expected bool or TaskResult")


@dataclass(frozen=True)
class Task:
    """Immutable catalog entry."""

    name: str
    priority: float  # Higher runs first
    reliability: float  # Estimated chance of success, (0, 1]
    body: Callable[[Any], bool | TaskResult | None] = field(compare=False, repr=False)
    requires: tuple[str, ...] = ()  # Tasks that must be done first

    def __post_init__(self):
        if not 0.0 < self.reliability <= 1.0:
            raise ValueError(f"{self.name}: reliability must be in (0, 1], got {self.reliability}")
        object.__setattr__(self, "requires", tuple(self.requires))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TaskOutcome:
    """Record of one attempt, for reporting."""

    task: str
    result: TaskResult | None
    duration: float = 0.0

    @property
    def success(self) -> bool | None:
        if self.result is None:
            return None
        return self.result is TaskResult.SUCCESS

    @property
    def is_supported(self) -> bool:
        return self.result is not TaskResult.NOT_SUPPORTED

    def to_dict(self) -> dict:
        return {
            "task": self.task,
            "result": self.result.value if self.result else None,
            "success": self.success,
            "duration": round(self.duration, 3),
        }


@dataclass(frozen=True)
class Ready:
    pass


@dataclass(frozen=True)
class WaitingOn:
    task: str


@dataclass(frozen=True)
class Done:
    outcome: TaskOutcome


TaskStatus = Union[Ready, WaitingOn, Done]


class NoEligibleTask(LookupError):
    """next_task() called with nothing left to run."""


class TaskNotReady(RuntimeError):
    """do_task() called on a task that is waiting on a prerequisite."""


class TaskAlreadyDone(RuntimeError):
    """do_task() called on a task that already ran."""


class DecisionMaker:
    """
    Runs a fixed catalog of tasks, one at a time.

    Usage:
        decider = DecisionMaker(catalog)
        while not decider.is_done:
            task = decider.next_task()
            result = decider.do_task(task, context)
    """

    def __init__(self, tasks: Iterable[Task], rank_by_reliability: bool = False):
        self.tasks: tuple[Task, ...] = tuple(tasks)
        self.rank_by_reliability = rank_by_reliability
        self._order = {task.name: i for i, task in enumerate(self.tasks)}
        self._by_name = {task.name: task for task in self.tasks}
        self._outcomes: dict[str, TaskOutcome] = {}
        self._validate()

    @property
    def is_done(self) -> bool:
        return len(self._outcomes) == len(self.tasks)

    @property
    def pending(self) -> list[Task]:
        return [t for t in self.tasks if t.name not in self._outcomes]

    @property
    def ready(self) -> list[Task]:
        return [t for t in self.pending if isinstance(self.status(t), Ready)]

    @property
    def outcomes(self) -> list[TaskOutcome]:
        """Outcomes in the order tasks were attempted."""
        return list(self._outcomes.values())

    def task(self, name: str) -> Task:
        return self._by_name[name]

    def status(self, task: Task | str) -> TaskStatus:
        task = self._resolve(task)
        outcome = self._outcomes.get(task.name)
        if outcome is not None:
            return Done(outcome)
        for name in task.requires:
            if name not in self._outcomes:
                return WaitingOn(name)
        return Ready()

    def next_task(self) -> Task:
        """Highest-ranked ready task."""
        ready = self.ready
        if not ready:
            raise NoEligibleTask("No pending task left to run")
        return min(ready, key=self._rank)

    def do_task(self, task: Task | str, context) -> bool | None:
        """
        Run a task body once and retire it.

        Returns:
            True on success, False on failure or when the task is not
            supported yet, None if the body gave no determinate result.
        """
        task = self._resolve(task)
        status = self.status(task)
        if isinstance(status, Done):
            raise TaskAlreadyDone(f"Task {task.name} already ran")
        if isinstance(status, WaitingOn):
            raise TaskNotReady(f"Task {task.name} is waiting on {status.task}")

        logger.info(f"Running task {task.name} (priority={task.priority:.3f})")
        start = time.monotonic()
        result = TaskResult.from_body(task.body(context))
        outcome = TaskOutcome(task.name, result, time.monotonic() - start)
        self._outcomes[task.name] = outcome

        logger.info(
            f"Task {task.name} finished: "
            f"{result.name if result else 'INDETERMINATE'} in {outcome.duration:.2f}s"
        )
        return outcome.success

    def snapshot(self) -> dict:
        """Current state for JSON API."""
        statuses = {}
        for task in self.tasks:
            status = self.status(task)
            if isinstance(status, Done):
                statuses[task.name] = {"status": "done", **status.outcome.to_dict()}
            elif isinstance(status, WaitingOn):
                statuses[task.name] = {"status": "waiting", "on": status.task}
            else:
                statuses[task.name] = {"status": "ready"}
        return {
            "done": self.is_done,
            "tasks": statuses,
            "order": [o.task for o in self.outcomes],
        }

    def _rank(self, task: Task) -> tuple:
        reliability = -task.reliability if self.rank_by_reliability else 0.0
        return (-task.priority, reliability, self._order[task.name])

    def _resolve(self, task: Task | str) -> Task:
        name = task if isinstance(task, str) else task.name
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Task {name} is not in the catalog") from None

    def _validate(self) -> None:
        if len(self._by_name) != len(self.tasks):
            raise ValueError("Task names must be unique")
        for task in self.tasks:
            for name in task.requires:
                if name not in self._by_name:
                    raise ValueError(f"Task {task.name} requires unknown task {name}")

        # Depth-first search for precedence cycles
        visiting: set[str] = set()
        finished: set[str] = set()

        def visit(name: str) -> None:
            if name in finished:
                return
            if name in visiting:
                raise ValueError(f"Precedence cycle through task {name}")
            visiting.add(name)
            for required in self._by_name[name].requires:
                visit(required)
            visiting.discard(name)
            finished.add(name)

        for task in self.tasks:
            visit(task.name)
