"""
Pre-match configuration from operator input.

Input events are dicts of button states or explicit selections, e.g.
{"x": True} or {"alliance": "blue"}. Each rule pairs a predicate over the
event with a pure transition of the MatchConfig. MatchSetup holds the
current value between runs and refuses changes while a run is using it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from params import Alliance, MatchConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigRule:
    """Input predicate -> configuration transition."""

    name: str  # MatchConfig field the rule changes
    predicate: Callable[[dict], bool]
    transition: Callable[[MatchConfig, dict], MatchConfig]


DEFAULT_RULES: tuple[ConfigRule, ...] = (
    # Button X toggles alliance color
    ConfigRule(
        "alliance",
        lambda event: bool(event.get("x")),
        lambda config, event: config.toggled_alliance(),
    ),
    # Button A toggles starting position
    ConfigRule(
        "starting_left",
        lambda event: bool(event.get("a")),
        lambda config, event: config.toggled_start(),
    ),
    # Explicit selections from the web page
    ConfigRule(
        "alliance",
        lambda event: event.get("alliance") in ("red", "blue"),
        lambda config, event: config.with_alliance(Alliance(event["alliance"])),
    ),
    ConfigRule(
        "starting_left",
        lambda event: isinstance(event.get("starting_left"), bool),
        lambda config, event: config.with_starting_left(event["starting_left"]),
    ),
)


def apply_input(
    config: MatchConfig,
    event: dict,
    rules: tuple[ConfigRule, ...] = DEFAULT_RULES,
) -> tuple[MatchConfig, list[str]]:
    """
    Apply every rule whose predicate matches, in order.

    Returns:
        (new config, names of the fields that changed)
    """
    changed = []
    for rule in rules:
        if rule.predicate(event):
            config = rule.transition(config, event)
            changed.append(rule.name)
    return config, changed


class ConfigLocked(RuntimeError):
    """Configuration change attempted during a run."""


class MatchSetup:
    """
    Owner of the match configuration between runs.

    Usage:
        setup = MatchSetup(telemetry=telemetry)
        setup.handle({"x": True})        # RED -> BLUE
        config = setup.lock()            # frozen for the next run
        ...
        setup.unlock()
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        telemetry=None,
        rules: tuple[ConfigRule, ...] = DEFAULT_RULES,
    ):
        self._config = config or MatchConfig()
        self.telemetry = telemetry
        self.rules = rules
        self._locked = False
        self._lock = threading.Lock()

    @property
    def current(self) -> MatchConfig:
        with self._lock:
            return self._config

    @property
    def is_locked(self) -> bool:
        return self._locked

    def handle(self, event: dict) -> MatchConfig:
        with self._lock:
            if self._locked:
                raise ConfigLocked("Match configuration is locked while a run is active")
            self._config, changed = apply_input(self._config, event, self.rules)
            config = self._config

        for name in changed:
            value = getattr(config, name)
            if isinstance(value, Alliance):
                value = value.name
            logger.info(f"Match config {name} -> {value}")
            if self.telemetry is not None:
                self.telemetry.data(f"DynConf: {name} now", value)
        return config

    def lock(self) -> MatchConfig:
        """Freeze the configuration for a run and return it."""
        with self._lock:
            if self._locked:
                raise ConfigLocked("A run is already active")
            self._locked = True
            return self._config

    def unlock(self) -> None:
        with self._lock:
            self._locked = False
