"""Tests for propagation models, signal_strength and best_signal.

Ray-tracing results are random: they are only checked within bounds or
with a seeded generator, never for exact values across calls.
"""

from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from domain.coverage.models import get_propagation_model
from domain.coverage.propagation import (
    best_signal,
    cost231_hata_path_loss,
    free_space_path_loss,
    itu_indoor_path_loss,
    path_loss,
    ray_tracing_path_loss,
    round_half_up,
    signal_strength,
)
from domain.coverage.value_objects import PropagationModel, PropagationModelKind
from domain.terrain.services import EARTH_RADIUS_M
from tests.conftest_utils import (
    ANTENNA_HEIGHT_M,
    STATION_HEIGHT_M,
    STATION_LAT,
    STATION_LON,
    make_antenna,
    make_station,
)

ANTENNA_WORLD_HEIGHT_M = STATION_HEIGHT_M + ANTENNA_HEIGHT_M


def lat_north_of_station(distance_m: float) -> float:
    """Latitude lying distance_m due north of the reference station."""
    return STATION_LAT + math.degrees(distance_m / EARTH_RADIUS_M)


# ===========================================================================
# Free space
# ===========================================================================
@pytest.mark.parametrize(
    "distance, frequency",
    [(0.0, 1800.0), (-5.0, 1800.0), (1000.0, 0.0), (1000.0, -900.0), (0.0, 0.0)],
)
def test_free_space_degenerate_inputs_return_zero(distance, frequency):
    assert free_space_path_loss(distance, frequency) == 0


def test_free_space_known_value():
    # 20*log10(1) + 20*log10(1800) + 32.45
    assert free_space_path_loss(1000.0, 1800.0) == pytest.approx(97.55, abs=0.01)


def test_free_space_grows_6db_per_doubling():
    near = free_space_path_loss(500.0, 900.0)
    far = free_space_path_loss(1000.0, 900.0)
    assert far - near == pytest.approx(20 * math.log10(2))


# ===========================================================================
# COST-231-Hata
# ===========================================================================
@pytest.mark.parametrize("distance", [1.0, 50.0, 500.0, 2000.0, 20_000.0])
@pytest.mark.parametrize("frequency", [1500.0, 1750.0, 2000.0])
@pytest.mark.parametrize("city_type", [0, 1])
def test_cost231_never_below_free_space(distance, frequency, city_type):
    loss = cost231_hata_path_loss(distance, frequency, 30.0, 1.5, city_type)
    assert loss >= free_space_path_loss(distance, frequency)


@pytest.mark.parametrize("frequency", [900.0, 1499.9, 2000.1, 2500.0])
def test_cost231_out_of_band_equals_free_space(frequency):
    assert cost231_hata_path_loss(1500.0, frequency) == free_space_path_loss(
        1500.0, frequency
    )


def test_cost231_below_one_meter_equals_free_space():
    assert cost231_hata_path_loss(0.5, 1800.0) == free_space_path_loss(0.5, 1800.0)


@pytest.mark.parametrize(
    "base_height, mobile_height", [(0.0, 1.5), (30.0, 0.0), (30.0, -4.0)]
)
def test_cost231_non_positive_heights_fall_back(base_height, mobile_height):
    loss = cost231_hata_path_loss(2000.0, 1800.0, base_height, mobile_height)
    assert loss == free_space_path_loss(2000.0, 1800.0)


def test_cost231_in_envelope_exceeds_free_space():
    loss = cost231_hata_path_loss(2000.0, 1800.0, 30.0, 1.5, 1)
    assert loss == pytest.approx(149.84, abs=0.05)
    assert loss > free_space_path_loss(2000.0, 1800.0)


def test_cost231_city_type_changes_height_correction():
    large = cost231_hata_path_loss(2000.0, 1800.0, 30.0, 1.5, city_type=1)
    small = cost231_hata_path_loss(2000.0, 1800.0, 30.0, 1.5, city_type=0)
    assert small < large


def test_cost231_explicit_city_type_zero_is_honoured():
    model = PropagationModel(
        kind=PropagationModelKind.COST231_HATA,
        name="COST-231-Hata small city",
        parameters={"city_type": 0},
    )
    loss = path_loss(model, 2000.0, 1800.0, 30.0, 1.5)
    assert loss == cost231_hata_path_loss(2000.0, 1800.0, 30.0, 1.5, city_type=0)


# ===========================================================================
# ITU indoor
# ===========================================================================
def test_itu_indoor_default_penalties():
    assert itu_indoor_path_loss(1000.0, 1800.0) == pytest.approx(
        free_space_path_loss(1000.0, 1800.0) + 12 + 15
    )


def test_itu_indoor_uses_model_parameters():
    model = PropagationModel(
        kind=PropagationModelKind.ITU_INDOOR,
        name="ITU two floors, no wall",
        parameters={"wall_loss": 0, "floors": 2},
    )
    loss = path_loss(model, 1000.0, 1800.0, 30.0)
    assert loss == pytest.approx(free_space_path_loss(1000.0, 1800.0) + 30.0)


# ===========================================================================
# Ray tracing approximation
# ===========================================================================
def test_ray_tracing_within_jitter_bounds():
    free_space = free_space_path_loss(1000.0, 1800.0)
    for _ in range(200):
        loss = ray_tracing_path_loss(1000.0, 1800.0)
        assert free_space <= loss <= free_space + 10.0


def test_ray_tracing_seeded_generator_is_repeatable():
    first = ray_tracing_path_loss(1000.0, 1800.0, rng=np.random.default_rng(7))
    second = ray_tracing_path_loss(1000.0, 1800.0, rng=np.random.default_rng(7))
    assert first == second


# ===========================================================================
# Dispatch
# ===========================================================================
def test_path_loss_dispatches_free_space():
    model = get_propagation_model(PropagationModelKind.FREE_SPACE)
    assert path_loss(model, 1000.0, 1800.0, 80.0) == free_space_path_loss(
        1000.0, 1800.0
    )


def test_path_loss_unknown_kind_falls_back_with_warning(caplog):
    model = PropagationModel.model_construct(
        kind="okumura-hata", name="Okumura", description="", parameters={}
    )

    with caplog.at_level(logging.WARNING, logger="domain.coverage.propagation"):
        loss = path_loss(model, 1000.0, 1800.0, 80.0)

    assert loss == free_space_path_loss(1000.0, 1800.0)
    assert "Unknown propagation model" in caplog.text


def test_path_loss_cost231_fallback_is_logged(caplog):
    model = get_propagation_model(PropagationModelKind.COST231_HATA)

    with caplog.at_level(logging.DEBUG, logger="domain.coverage.propagation"):
        path_loss(model, 1000.0, 2500.0, 80.0)

    assert "outside envelope" in caplog.text


# ===========================================================================
# signal_strength
# ===========================================================================
def test_signal_strength_at_antenna_position_is_degenerate():
    antenna = make_antenna()
    station = make_station(antennas=(antenna,))

    estimate = signal_strength(
        station, antenna, STATION_LAT, STATION_LON, ANTENNA_WORLD_HEIGHT_M
    )

    assert estimate.distance_m == 0
    assert estimate.path_loss_db == 0
    assert estimate.rssi_dbm == pytest.approx(43.0 + 15.0)


def test_signal_strength_known_free_space_value():
    antenna = make_antenna()
    station = make_station(antennas=(antenna,))

    estimate = signal_strength(
        station,
        antenna,
        lat_north_of_station(1000.0),
        STATION_LON,
        ANTENNA_WORLD_HEIGHT_M,
    )

    assert estimate.distance_m == pytest.approx(1000.0, abs=0.01)
    assert estimate.path_loss_db == pytest.approx(97.56, abs=0.01)
    assert estimate.rssi_dbm == pytest.approx(58.0 - 97.56, abs=0.01)
    assert estimate.antenna_id == antenna.id
    assert estimate.station_id == station.id
    assert estimate.model_name == antenna.propagation_model.name


def test_signal_strength_default_target_height_is_handset():
    antenna = make_antenna()
    station = make_station(antennas=(antenna,))

    estimate = signal_strength(station, antenna, STATION_LAT, STATION_LON)

    # Straight down from 80 m to 1.5 m
    assert estimate.distance_m == pytest.approx(78.5)


def test_signal_strength_rounds_to_two_decimals():
    antenna = make_antenna(kind=PropagationModelKind.COST231_HATA)
    station = make_station(antennas=(antenna,))

    estimate = signal_strength(station, antenna, 39.9137, 116.4291)

    for value in (estimate.rssi_dbm, estimate.distance_m, estimate.path_loss_db):
        assert value == round(value, 2)


@pytest.mark.parametrize(
    "value, expected",
    [(0.125, 0.13), (-0.125, -0.12), (-97.375, -97.37), (2.5, 2.5), (-60.0, -60.0)],
)
def test_round_half_up_breaks_ties_upward(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize(
    "kind",
    [
        PropagationModelKind.FREE_SPACE,
        PropagationModelKind.COST231_HATA,
        PropagationModelKind.ITU_INDOOR,
    ],
)
def test_signal_strength_non_increasing_with_distance(kind):
    antenna = make_antenna(kind=kind)
    station = make_station(antennas=(antenna,))

    rssi = [
        signal_strength(station, antenna, lat_north_of_station(d), STATION_LON).rssi_dbm
        for d in (1.0, 10.0, 100.0, 500.0, 1000.0, 2500.0, 5000.0, 15_000.0)
    ]

    assert all(later <= earlier for earlier, later in zip(rssi, rssi[1:]))


def test_signal_strength_ray_tracing_bounded(rng):
    antenna = make_antenna(kind=PropagationModelKind.RAY_TRACING)
    station = make_station(antennas=(antenna,))
    target_lat = lat_north_of_station(1000.0)

    estimate = signal_strength(
        station, antenna, target_lat, STATION_LON, ANTENNA_WORLD_HEIGHT_M, rng=rng
    )

    free_space = free_space_path_loss(1000.0, 1800.0)
    assert free_space - 0.01 <= estimate.path_loss_db <= free_space + 10.01


# ===========================================================================
# best_signal
# ===========================================================================
def test_best_signal_no_stations_is_empty():
    assert best_signal([], STATION_LAT, STATION_LON) == []


@pytest.mark.parametrize("n_stations, n_antennas", [(1, 0), (1, 3), (3, 2), (4, 1)])
def test_best_signal_counts_and_orders(n_stations, n_antennas):
    stations = [
        make_station(
            f"bs-{s}",
            antennas=tuple(
                make_antenna(f"bs-{s}-ant-{a}", transmit_power_dbm=30.0 + 3 * a)
                for a in range(n_antennas)
            ),
            latitude=STATION_LAT + 0.01 * s,
        )
        for s in range(n_stations)
    ]

    results = best_signal(stations, STATION_LAT + 0.005, STATION_LON + 0.005)

    assert len(results) == n_stations * n_antennas
    rssi = [r.rssi_dbm for r in results]
    assert rssi == sorted(rssi, reverse=True)


def test_best_signal_strongest_first():
    near = make_station("near", antennas=(make_antenna("near-a"),))
    far = make_station(
        "far", antennas=(make_antenna("far-a"),), latitude=STATION_LAT + 0.2
    )

    results = best_signal([far, near], STATION_LAT, STATION_LON + 0.01)

    assert [r.station_id for r in results] == ["near", "far"]
