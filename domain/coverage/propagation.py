"""Coverage Bounded Context - Propagation Models.

Closed-form path loss models and the received-signal computation built on
them. Pure functions: no shared state except the random source used by the
ray-tracing approximation.

Degenerate inputs never raise:
- distance <= 0 or frequency <= 0 gives 0 dB free-space loss
- COST-231-Hata outside its validity envelope falls back to free space
- an unhandled model kind falls back to free space
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

import numpy as np

from domain.coverage.value_objects import (
    PropagationModel,
    PropagationModelKind,
    SignalEstimate,
)
from domain.siting.value_objects import Antenna, BaseStation
from domain.terrain.services import distance_3d
from domain.terrain.value_objects import WorldPoint

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_TARGET_HEIGHT_M = 1.5  # Typical handset height

FREE_SPACE_CONSTANT_DB = 32.45  # For d in km, f in MHz

# COST-231-Hata validity envelope
COST231_MIN_DISTANCE_M = 1.0
COST231_MIN_FREQUENCY_MHZ = 1500.0
COST231_MAX_FREQUENCY_MHZ = 2000.0
COST231_METRO_CORRECTION_DB = 3.0
DEFAULT_BASE_HEIGHT_M = 30.0
DEFAULT_CITY_TYPE = 1  # 1 = large city, 0 = medium/small city

# ITU indoor penalties
DEFAULT_WALL_LOSS_DB = 12.0
DEFAULT_FLOORS = 1
FLOOR_LOSS_DB = 15.0

RAY_TRACING_MAX_JITTER_DB = 10.0

# Process-wide source for the ray-tracing jitter
_rng = np.random.default_rng()


# ---------------------------------------------------------------------------
# Path loss models
# ---------------------------------------------------------------------------
def free_space_path_loss(distance_m: float, frequency_mhz: float) -> float:
    """Free-space path loss in dB.

    PL = 20*log10(d_km) + 20*log10(f_MHz) + 32.45

    Returns exactly 0 for distance <= 0 or frequency <= 0.
    """
    if distance_m <= 0 or frequency_mhz <= 0:
        return 0.0

    distance_km = distance_m / 1000.0
    return (
        20 * math.log10(distance_km)
        + 20 * math.log10(frequency_mhz)
        + FREE_SPACE_CONSTANT_DB
    )


def cost231_hata_path_loss(
    distance_m: float,
    frequency_mhz: float,
    base_height_m: float = DEFAULT_BASE_HEIGHT_M,
    mobile_height_m: float = DEFAULT_TARGET_HEIGHT_M,
    city_type: int = DEFAULT_CITY_TYPE,
) -> float:
    """COST-231-Hata urban path loss in dB.

    Valid for distance >= 1 m and 1500 <= f <= 2000 MHz with positive
    antenna heights; anything else falls back to free space. The result is
    never lower than the free-space loss for the same distance/frequency.

    Args:
        distance_m: Transmitter-receiver distance in meters
        frequency_mhz: Carrier frequency in MHz
        base_height_m: Base station antenna height (hb) in meters
        mobile_height_m: Mobile antenna height (hm) in meters
        city_type: 1 for a large city, anything else for medium/small city

    Returns:
        Path loss in dB
    """
    free_space = free_space_path_loss(distance_m, frequency_mhz)

    if (
        distance_m < COST231_MIN_DISTANCE_M
        or frequency_mhz < COST231_MIN_FREQUENCY_MHZ
        or frequency_mhz > COST231_MAX_FREQUENCY_MHZ
    ):
        logger.debug(
            "COST-231-Hata outside envelope (d=%.2fm, f=%.1fMHz); using free space",
            distance_m,
            frequency_mhz,
        )
        return free_space

    if base_height_m <= 0 or mobile_height_m <= 0:
        logger.debug(
            "COST-231-Hata needs positive heights (hb=%.2f, hm=%.2f); using free space",
            base_height_m,
            mobile_height_m,
        )
        return free_space

    log_f = math.log10(frequency_mhz)
    log_hb = math.log10(base_height_m)

    # Mobile antenna height correction
    if city_type == 1:
        a_hm = 3.2 * math.log10(11.75 * mobile_height_m) ** 2 - 4.97
    else:
        a_hm = (1.1 * log_f - 0.7) * mobile_height_m - (1.56 * log_f - 0.8)

    path_loss = (
        46.3
        + 33.9 * log_f
        - 13.82 * log_hb
        - a_hm
        + (44.9 - 6.55 * log_hb) * math.log10(distance_m / 1000.0)
        + COST231_METRO_CORRECTION_DB
    )

    # Urban loss cannot undercut free space
    return max(path_loss, free_space)


def itu_indoor_path_loss(
    distance_m: float,
    frequency_mhz: float,
    wall_loss_db: float = DEFAULT_WALL_LOSS_DB,
    floors: float = DEFAULT_FLOORS,
) -> float:
    """Free space plus additive wall and per-floor (15 dB) penalties."""
    return (
        free_space_path_loss(distance_m, frequency_mhz)
        + wall_loss_db
        + floors * FLOOR_LOSS_DB
    )


def ray_tracing_path_loss(
    distance_m: float,
    frequency_mhz: float,
    rng: np.random.Generator | None = None,
) -> float:
    """Free space plus uniform random 0-10 dB jitter.

    This is a stand-in for multipath ray tracing, not a physical model.
    Results are NOT reproducible across calls unless a seeded rng is passed.
    """
    generator = rng if rng is not None else _rng
    jitter = float(generator.uniform(0.0, RAY_TRACING_MAX_JITTER_DB))
    return free_space_path_loss(distance_m, frequency_mhz) + jitter


def path_loss(
    model: PropagationModel,
    distance_m: float,
    frequency_mhz: float,
    antenna_height_m: float,
    target_height_m: float = DEFAULT_TARGET_HEIGHT_M,
    rng: np.random.Generator | None = None,
) -> float:
    """Dispatch to the path loss model selected by model.kind.

    Args:
        model: Propagation model; parameters supply the tunables
        distance_m: Transmitter-receiver distance in meters
        frequency_mhz: Carrier frequency in MHz
        antenna_height_m: Transmitter height in meters
        target_height_m: Receiver height in meters
        rng: Optional generator for the ray-tracing jitter

    Returns:
        Path loss in dB. Unhandled kinds degrade to free space.
    """
    kind = model.kind

    if kind == PropagationModelKind.FREE_SPACE:
        return free_space_path_loss(distance_m, frequency_mhz)

    if kind == PropagationModelKind.COST231_HATA:
        return cost231_hata_path_loss(
            distance_m,
            frequency_mhz,
            base_height_m=antenna_height_m,
            mobile_height_m=target_height_m,
            city_type=int(model.parameter("city_type", DEFAULT_CITY_TYPE)),
        )

    if kind == PropagationModelKind.ITU_INDOOR:
        return itu_indoor_path_loss(
            distance_m,
            frequency_mhz,
            wall_loss_db=model.parameter("wall_loss", DEFAULT_WALL_LOSS_DB),
            floors=model.parameter("floors", DEFAULT_FLOORS),
        )

    if kind == PropagationModelKind.RAY_TRACING:
        logger.debug("Ray-tracing model is approximate (random jitter)")
        return ray_tracing_path_loss(distance_m, frequency_mhz, rng=rng)

    logger.warning("Unknown propagation model %r; using free space", kind)
    return free_space_path_loss(distance_m, frequency_mhz)


# ---------------------------------------------------------------------------
# Signal strength
# ---------------------------------------------------------------------------
def round_half_up(value: float, digits: int = 2) -> float:
    """Round half toward +infinity, so -0.125 gives -0.12 and 0.125 gives 0.13."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def signal_strength(
    station: BaseStation,
    antenna: Antenna,
    target_lat: float,
    target_lon: float,
    target_height: float = DEFAULT_TARGET_HEIGHT_M,
    rng: np.random.Generator | None = None,
) -> SignalEstimate:
    """Estimate the signal received from one antenna at a target point.

    RSSI = transmit power + antenna gain - path loss.
    The antenna sits at the station location, at station height plus its own
    height above the station.

    Example:
        >>> estimate = signal_strength(station, antenna, 39.91, 116.40)
        >>> estimate.rssi_dbm, estimate.distance_m
    """
    origin = station.antenna_position(antenna)
    target = WorldPoint(latitude=target_lat, longitude=target_lon, height=target_height)

    distance = distance_3d(origin, target)
    loss = path_loss(
        antenna.propagation_model,
        distance,
        antenna.frequency_mhz,
        origin.height,
        target_height,
        rng=rng,
    )
    rssi = antenna.transmit_power_dbm + antenna.gain_dbi - loss

    return SignalEstimate(
        rssi_dbm=round_half_up(rssi),
        distance_m=round_half_up(distance),
        path_loss_db=round_half_up(loss),
        antenna_id=antenna.id,
        station_id=station.id,
        model_name=antenna.propagation_model.name,
    )


def best_signal(
    stations: Iterable[BaseStation],
    target_lat: float,
    target_lon: float,
    target_height: float = DEFAULT_TARGET_HEIGHT_M,
    rng: np.random.Generator | None = None,
) -> list[SignalEstimate]:
    """Signal estimates of every antenna at one target, strongest first.

    Returns one estimate per antenna across all stations (empty for no
    stations). Equal RSSI values keep no particular order.
    """
    results = [
        signal_strength(
            station, antenna, target_lat, target_lon, target_height, rng=rng
        )
        for station in stations
        for antenna in station.antennas
    ]
    results.sort(key=lambda estimate: estimate.rssi_dbm, reverse=True)
    return results
