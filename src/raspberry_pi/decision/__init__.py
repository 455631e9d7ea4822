"""
Decision Layer - What to do next.

Contains:
- DecisionMaker: ranks, runs and retires autonomous tasks
- Task / TaskOutcome / TaskResult: catalog entries and their results
"""

from .decision_maker import (
    DecisionMaker,
    Done,
    NoEligibleTask,
    Ready,
    Task,
    TaskAlreadyDone,
    TaskNotReady,
    TaskOutcome,
    TaskResult,
    TaskStatus,
    WaitingOn,
)

__all__ = [
    "DecisionMaker",
    "Done",
    "NoEligibleTask",
    "Ready",
    "Task",
    "TaskAlreadyDone",
    "TaskNotReady",
    "TaskOutcome",
    "TaskResult",
    "TaskStatus",
    "WaitingOn",
]
