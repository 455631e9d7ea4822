"""Test configuration and fixtures."""

import pytest

from control import Hardware, MatchSetup
from drivetrain import SimulatedDrivetrain
from mission import MissionState, TaskContext
from navigation import AutoNav, Navigator
from params import Alliance, MatchConfig, Parameters
from sensors import Marker, SimulatedKnocker, SimulatedMarkerReader
from telemetry import Telemetry


@pytest.fixture
def params() -> Parameters:
    """Defaults, without touching params.json, and no dwell time."""
    p = Parameters()
    p.park_dwell = 0.0
    return p


@pytest.fixture
def telemetry() -> Telemetry:
    return Telemetry()


@pytest.fixture
def red_left() -> MatchConfig:
    return MatchConfig(Alliance.RED, starting_left=True)


@pytest.fixture
def drivetrain() -> SimulatedDrivetrain:
    return SimulatedDrivetrain()


@pytest.fixture
def make_context(params, telemetry, drivetrain):
    """Build a TaskContext on simulated hardware."""

    def _make(
        match: MatchConfig = MatchConfig(),
        marker: Marker = Marker.CENTER,
        jewel: Alliance | None = Alliance.BLUE,
    ) -> TaskContext:
        return TaskContext(
            state=MissionState(match=match),
            drivetrain=drivetrain,
            navigator=Navigator(AutoNav(match, drivetrain)),
            marker_reader=SimulatedMarkerReader(marker),
            knocker=SimulatedKnocker(jewel),
            telemetry=telemetry,
            params=params,
            sleep=lambda seconds: None,
        )

    return _make


@pytest.fixture
def simulated_factory():
    """Hardware factory that remembers the bundle it built."""

    class Factory:
        def __init__(self):
            self.marker = Marker.CENTER
            self.jewel = Alliance.BLUE
            self.built: Hardware | None = None

        def __call__(self, p: Parameters) -> Hardware:
            self.built = Hardware.simulated(p, self.marker, self.jewel)
            return self.built

    return Factory()


@pytest.fixture
def setup(telemetry, red_left) -> MatchSetup:
    return MatchSetup(red_left, telemetry=telemetry)
