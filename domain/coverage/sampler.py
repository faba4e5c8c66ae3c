"""Coverage Bounded Context - Beam Sampler.

Discretizes an antenna's beam into (azimuth x elevation x range) cells and
builds contour polylines. Every position is produced by
`spherical_projection` from the antenna's world position.

Both generators are lazy and stateless; each cell is independent of every
other, so consumers may stop early or distribute the work freely.
Bookkeeping of previously emitted keys belongs to the caller
(see infrastructure.coverage.layer.CoverageLayer).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np

from domain.coverage.propagation import signal_strength
from domain.coverage.value_objects import (
    CellKey,
    ContourKey,
    ContourKind,
    ContourLine,
    CoverageCell,
)
from domain.siting.value_objects import Antenna, BaseStation
from domain.terrain.services import spherical_projection
from domain.terrain.value_objects import WorldPoint

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
RADIAL_STEPS = 5  # Concentric range shells per beam
BOUNDARY_SEGMENTS = 8  # Arc segments per cell edge

RANGE_CONTOUR_DISTANCES_M: tuple[float, ...] = (1000.0, 2000.0, 3000.0, 4000.0)
RANGE_CONTOUR_SEGMENTS = 20  # 21 points per range contour
BEARING_CONTOUR_SEGMENTS = 10  # 11 points per bearing contour


# ---------------------------------------------------------------------------
# Cell geometry
# ---------------------------------------------------------------------------
def cell_boundary(
    origin: WorldPoint,
    azimuth_bounds: tuple[float, float],
    elevation_bounds: tuple[float, float],
    distance_bounds: tuple[float, float],
    segments: int = BOUNDARY_SEGMENTS,
) -> tuple[WorldPoint, ...]:
    """Closed vertex loop approximating one sector cell.

    The inner arc is walked from azimuth start to end, emitting a
    (lower, upper) elevation pair per step; the outer arc is walked back
    from end to start emitting (upper, lower) pairs. With the default
    8 segments this yields 2 * 9 * 2 = 36 vertices.
    """
    az_start, az_end = azimuth_bounds
    el_start, el_end = elevation_bounds
    inner, outer = distance_bounds

    vertices: list[WorldPoint] = []

    # Inner arc
    for i in range(segments + 1):
        azimuth = az_start + (az_end - az_start) * (i / segments)
        vertices.append(spherical_projection(origin, inner, azimuth, el_start))
        vertices.append(spherical_projection(origin, inner, azimuth, el_end))

    # Outer arc, reversed
    for i in range(segments, -1, -1):
        azimuth = az_start + (az_end - az_start) * (i / segments)
        vertices.append(spherical_projection(origin, outer, azimuth, el_end))
        vertices.append(spherical_projection(origin, outer, azimuth, el_start))

    return tuple(vertices)


# ---------------------------------------------------------------------------
# Coverage cells
# ---------------------------------------------------------------------------
def sample_coverage(
    station: BaseStation,
    antenna: Antenna,
    rng: np.random.Generator | None = None,
) -> Iterator[CoverageCell]:
    """Yield one CoverageCell per (azimuth, elevation, range) bin.

    Produces horizontal_steps * vertical_steps * RADIAL_STEPS cells, or
    nothing when the beam is disabled. The signal estimate of each cell is
    evaluated at the projected bin centre.

    Args:
        station: Station owning the antenna
        antenna: Antenna whose beam is sampled
        rng: Optional generator for the ray-tracing jitter

    Yields:
        CoverageCell ordered by azimuth bin, then elevation bin, then range
    """
    beam = antenna.beam
    if not beam.enabled:
        logger.debug("Beam disabled for antenna %s; no cells", antenna.id)
        return

    origin = station.antenna_position(antenna)

    horizontal_start = antenna.azimuth_deg - beam.horizontal_beam_width_deg / 2
    vertical_start = antenna.elevation_deg - beam.vertical_beam_width_deg / 2
    horizontal_step = beam.horizontal_step_deg
    vertical_step = beam.vertical_step_deg

    logger.debug(
        "Sampling antenna %s: %d x %d x %d cells",
        antenna.id,
        beam.horizontal_steps,
        beam.vertical_steps,
        RADIAL_STEPS,
    )

    for h in range(beam.horizontal_steps):
        az_bounds = (
            horizontal_start + h * horizontal_step,
            horizontal_start + (h + 1) * horizontal_step,
        )
        center_az = (az_bounds[0] + az_bounds[1]) / 2

        for v in range(beam.vertical_steps):
            el_bounds = (
                vertical_start + v * vertical_step,
                vertical_start + (v + 1) * vertical_step,
            )
            center_el = (el_bounds[0] + el_bounds[1]) / 2

            for d in range(RADIAL_STEPS):
                dist_bounds = (
                    d / RADIAL_STEPS * beam.max_distance_m,
                    (d + 1) / RADIAL_STEPS * beam.max_distance_m,
                )
                center_dist = (dist_bounds[0] + dist_bounds[1]) / 2

                center = spherical_projection(origin, center_dist, center_az, center_el)
                estimate = signal_strength(
                    station,
                    antenna,
                    center.latitude,
                    center.longitude,
                    center.height,
                    rng=rng,
                )

                yield CoverageCell(
                    key=CellKey(antenna.id, h, v, d),
                    station_id=station.id,
                    azimuth_bounds=az_bounds,
                    elevation_bounds=el_bounds,
                    distance_bounds=dist_bounds,
                    center=center,
                    boundary=cell_boundary(origin, az_bounds, el_bounds, dist_bounds),
                    estimate=estimate,
                )


# ---------------------------------------------------------------------------
# Contours
# ---------------------------------------------------------------------------
def sample_contours(station: BaseStation, antenna: Antenna) -> Iterator[ContourLine]:
    """Yield range contours, then bearing contours, for an antenna.

    Nothing is produced unless the beam is enabled and show_contours is set.

    Range contours: fixed ranges of 1-4 km, skipped when beyond
    max_distance_m, each sweeping the full horizontal beam width.
    Bearing contours: beam centre and centre +/- a quarter of the width,
    each running from the antenna out to max_distance_m.
    Both lie at the antenna's nominal elevation. Range contour indices
    refer to the fixed range list, so a skipped range leaves a gap.
    """
    beam = antenna.beam
    if not (beam.enabled and beam.show_contours):
        return

    origin = station.antenna_position(antenna)
    elevation = antenna.elevation_deg
    width = beam.horizontal_beam_width_deg
    sweep_start = antenna.azimuth_deg - width / 2

    for index, distance in enumerate(RANGE_CONTOUR_DISTANCES_M):
        if distance > beam.max_distance_m:
            continue
        points = tuple(
            spherical_projection(
                origin,
                distance,
                sweep_start + width * i / RANGE_CONTOUR_SEGMENTS,
                elevation,
            )
            for i in range(RANGE_CONTOUR_SEGMENTS + 1)
        )
        yield ContourLine(
            key=ContourKey(antenna.id, ContourKind.RANGE, index),
            value=distance,
            points=points,
        )

    bearings = (
        antenna.azimuth_deg - width / 4,
        antenna.azimuth_deg,
        antenna.azimuth_deg + width / 4,
    )
    for index, azimuth in enumerate(bearings):
        points = tuple(
            spherical_projection(
                origin,
                beam.max_distance_m * i / BEARING_CONTOUR_SEGMENTS,
                azimuth,
                elevation,
            )
            for i in range(BEARING_CONTOUR_SEGMENTS + 1)
        )
        yield ContourLine(
            key=ContourKey(antenna.id, ContourKind.BEARING, index),
            value=azimuth,
            points=points,
        )
