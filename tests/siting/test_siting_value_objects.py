"""Tests for siting value objects: BeamConfig, Antenna, BaseStation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.coverage.models import FREE_SPACE
from domain.siting.value_objects import Antenna, BaseStation, BeamConfig
from tests.conftest_utils import (
    ANTENNA_HEIGHT_M,
    STATION_HEIGHT_M,
    make_antenna,
    make_station,
)


# ===========================================================================
# BeamConfig
# ===========================================================================
def test_beam_config_defaults():
    beam = BeamConfig()

    assert beam.enabled is True
    assert beam.horizontal_beam_width_deg == 120.0
    assert beam.vertical_beam_width_deg == 30.0
    assert beam.horizontal_steps == 12
    assert beam.vertical_steps == 30
    assert beam.max_distance_m == 5000.0
    assert beam.transparency == 0.6
    assert beam.show_contours is False


def test_beam_config_step_sizes():
    beam = BeamConfig()
    assert beam.horizontal_step_deg == pytest.approx(10.0)
    assert beam.vertical_step_deg == pytest.approx(1.0)


@pytest.mark.parametrize(
    "field, value",
    [
        ("horizontal_steps", 0),
        ("vertical_steps", -1),
        ("max_distance_m", 0.0),
        ("horizontal_beam_width_deg", 0.0),
        ("horizontal_beam_width_deg", 361.0),
        ("vertical_beam_width_deg", 181.0),
        ("transparency", 1.5),
    ],
)
def test_beam_config_rejects_invalid_values(field, value):
    with pytest.raises(ValidationError):
        BeamConfig(**{field: value})


def test_beam_config_is_frozen():
    beam = BeamConfig()
    with pytest.raises(ValidationError):
        beam.enabled = False  # type: ignore[misc]


# ===========================================================================
# Antenna
# ===========================================================================
def test_antenna_default_beam():
    antenna = Antenna(
        id="bare",
        azimuth_deg=0.0,
        transmit_power_dbm=40.0,
        frequency_mhz=1800.0,
        propagation_model=FREE_SPACE,
    )

    assert antenna.beam == BeamConfig()
    assert antenna.elevation_deg == 0.0
    assert antenna.height_m == 0.0


def test_antenna_requires_id():
    with pytest.raises(ValidationError):
        make_antenna("")


# ===========================================================================
# BaseStation
# ===========================================================================
def test_station_antenna_position_stacks_heights():
    antenna = make_antenna()
    station = make_station(antennas=(antenna,))

    position = station.antenna_position(antenna)

    assert position.height == STATION_HEIGHT_M + ANTENNA_HEIGHT_M
    assert position.latitude == station.latitude
    assert position.longitude == station.longitude


def test_station_rejects_duplicate_antenna_ids():
    with pytest.raises(ValidationError, match="Duplicate antenna ids"):
        make_station(antennas=(make_antenna("a"), make_antenna("a")))


def test_station_rejects_out_of_range_coordinates():
    with pytest.raises(ValidationError):
        make_station(latitude=95.0)


def test_station_antenna_lookup():
    first, second = make_antenna("a"), make_antenna("b")
    station = make_station(antennas=(first, second))

    assert station.antenna("b") == second
    assert station.antenna("missing") is None


def test_with_antenna_returns_new_station():
    station = make_station()
    antenna = make_antenna("new")

    updated = station.with_antenna(antenna)

    assert updated.antennas == (antenna,)
    assert station.antennas == ()
    assert isinstance(updated, BaseStation)


def test_with_antenna_keeps_uniqueness_invariant():
    station = make_station(antennas=(make_antenna("a"),))
    with pytest.raises(ValidationError):
        station.with_antenna(make_antenna("a"))


def test_without_antenna_preserves_order():
    a, b, c = make_antenna("a"), make_antenna("b"), make_antenna("c")
    station = make_station(antennas=(a, b, c))

    assert station.without_antenna("b").antennas == (a, c)
    assert station.without_antenna("zzz").antennas == (a, b, c)
