"""Coverage Bounded Context - Area Coverage Grid.

Evaluates the best-server signal on a regular lat/lon lattice, the area
counterpart of `best_signal` for a single target.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

import numpy as np

from domain.coverage.propagation import DEFAULT_TARGET_HEIGHT_M, best_signal
from domain.coverage.value_objects import CoverageGrid
from domain.siting.value_objects import BaseStation
from domain.terrain.value_objects import BoundingBox

logger = logging.getLogger(__name__)


def coverage_grid(
    stations: Iterable[BaseStation],
    bounds: BoundingBox,
    rows: int,
    cols: int,
    target_height: float = DEFAULT_TARGET_HEIGHT_M,
    rng: np.random.Generator | None = None,
) -> CoverageGrid:
    """Best RSSI over a rows x cols lattice spanning bounds (edges included).

    Args:
        stations: Stations whose antennas compete for each sample
        bounds: Area to cover; row 0 lies on max_y, column 0 on min_x
        rows: Number of latitude samples (>= 2)
        cols: Number of longitude samples (>= 2)
        target_height: Receiver height in meters
        rng: Optional generator for the ray-tracing jitter

    Returns:
        CoverageGrid; samples hold NaN when there is no antenna at all

    Raises:
        ValueError: If rows or cols is below 2
    """
    if rows < 2 or cols < 2:
        raise ValueError(f"rows and cols must be >= 2, got {rows}x{cols}")

    stations = tuple(stations)
    latitudes = np.linspace(bounds.max_y, bounds.min_y, rows)
    longitudes = np.linspace(bounds.min_x, bounds.max_x, cols)

    data = np.full((rows, cols), np.nan, dtype=np.float64)
    for r, lat in enumerate(latitudes):
        for c, lon in enumerate(longitudes):
            estimates = best_signal(
                stations, float(lat), float(lon), target_height, rng=rng
            )
            data[r, c] = estimates[0].rssi_dbm if estimates else math.nan

    logger.debug(
        "Coverage grid %dx%d over %d stations computed", rows, cols, len(stations)
    )
    return CoverageGrid(data=data, bounds=bounds, target_height=target_height)
