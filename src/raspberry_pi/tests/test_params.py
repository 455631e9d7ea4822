"""Tests for runtime parameters and the match configuration value."""

import json

import pytest

import params as params_module
from params import Alliance, MatchConfig, Parameters


@pytest.fixture
def params_file(tmp_path, monkeypatch):
    path = tmp_path / "params.json"
    monkeypatch.setattr(params_module, "PARAMS_FILE", path)
    return path


def test_save_and_load(params_file):
    p = Parameters()
    p.default_power = 0.5
    p.marker_right_id = 7
    p.save()

    loaded = Parameters.load()
    assert loaded.default_power == 0.5
    assert loaded.marker_right_id == 7
    assert json.loads(params_file.read_text())["default_power"] == 0.5


def test_load_missing_file_gives_defaults(params_file):
    assert Parameters.load() == Parameters()


def test_load_corrupt_file_gives_defaults(params_file):
    params_file.write_text("{not json")
    assert Parameters.load() == Parameters()


def test_update_coerces_types():
    p = Parameters()
    p.update(min_contour_area="250", park_dwell=2)
    assert p.min_contour_area == 250
    assert p.park_dwell == 2.0
    assert isinstance(p.park_dwell, float)


@pytest.mark.parametrize("value, expected", [("true", True), ("on", True), ("0", False), (True, True)])
def test_update_bool(value, expected):
    p = Parameters()
    p.update(rank_by_reliability=value)
    assert p.rank_by_reliability is expected


def test_update_ignores_unknown_and_invalid():
    p = Parameters()
    p.update(warp_drive=True, marker_timeout="soon")
    assert not hasattr(p, "warp_drive")
    assert p.marker_timeout == Parameters().marker_timeout


class TestMatchConfig:
    def test_defaults(self):
        config = MatchConfig()
        assert config.alliance is Alliance.RED
        assert config.starting_left is True

    def test_transitions_return_new_values(self):
        config = MatchConfig()
        assert config.toggled_alliance().alliance is Alliance.BLUE
        assert config.toggled_start().starting_left is False
        assert config.with_alliance(Alliance.BLUE) == MatchConfig(Alliance.BLUE, True)
        assert config == MatchConfig()

    def test_frozen(self):
        with pytest.raises(AttributeError):
            MatchConfig().alliance = Alliance.BLUE

    def test_to_dict(self):
        assert MatchConfig(Alliance.BLUE, False).to_dict() == {
            "alliance": "blue",
            "starting_left": False,
        }

    def test_opposite(self):
        assert Alliance.RED.opposite is Alliance.BLUE
        assert Alliance.BLUE.opposite is Alliance.RED
