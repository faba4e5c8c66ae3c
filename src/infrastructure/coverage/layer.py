"""Coverage layer bookkeeping for renderers.

Tracks which cell and contour keys have been emitted per antenna so that a
recompute retracts exactly the previous geometry before emitting new
geometry. Keys are structured tuples (CellKey / ContourKey), never parsed
strings.

Nothing here renders: each call returns a CoverageDiff and the caller applies
it to its scene.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from domain.coverage.sampler import sample_contours, sample_coverage
from domain.coverage.value_objects import CellKey, ContourKey, ContourLine, CoverageCell
from domain.siting.value_objects import Antenna, BaseStation

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

GeometryKey = CellKey | ContourKey


@dataclass(frozen=True)
class CoverageDiff:
    """Changes a renderer must apply: remove `retracted`, then add the rest."""

    retracted: tuple[GeometryKey, ...] = ()
    cells: tuple[CoverageCell, ...] = ()
    contours: tuple[ContourLine, ...] = ()

    def merge(self, other: "CoverageDiff") -> "CoverageDiff":
        return CoverageDiff(
            retracted=self.retracted + other.retracted,
            cells=self.cells + other.cells,
            contours=self.contours + other.contours,
        )


@dataclass
class CoverageLayer:
    """Emitted-geometry registry, keyed by antenna id.

    Each antenna's keys are also filed under the station it was rendered
    for, so that a station recompute retracts antennas that have since been
    removed from it.

    Parameters
    ----------
    rng: numpy Generator | None
        Optional generator forwarded to the sampler (ray-tracing jitter).
    """

    rng: np.random.Generator | None = None
    _emitted: dict[str, tuple[GeometryKey, ...]] = field(
        default_factory=dict, init=False, repr=False
    )
    _station_antennas: dict[str, list[str]] = field(
        default_factory=dict, init=False, repr=False
    )

    def emitted_keys(self, antenna_id: str) -> tuple[GeometryKey, ...]:
        return self._emitted.get(antenna_id, ())

    @property
    def antenna_ids(self) -> tuple[str, ...]:
        return tuple(self._emitted)

    def station_antenna_ids(self, station_id: str) -> tuple[str, ...]:
        """Antennas with geometry currently emitted for station_id."""
        return tuple(self._station_antennas.get(station_id, ()))

    def render_antenna(self, station: BaseStation, antenna: Antenna) -> CoverageDiff:
        """Retract the antenna's previous geometry and sample it afresh.

        A disabled beam only retracts.
        """
        retracted = self.clear_antenna(antenna.id)

        cells = tuple(sample_coverage(station, antenna, rng=self.rng))
        contours = tuple(sample_contours(station, antenna))

        keys: tuple[GeometryKey, ...] = tuple(c.key for c in cells) + tuple(
            c.key for c in contours
        )
        if keys:
            self._emitted[antenna.id] = keys
            self._station_antennas.setdefault(station.id, []).append(antenna.id)

        logger.debug(
            "Antenna %s: retracted %d, emitted %d cells and %d contours",
            antenna.id,
            len(retracted),
            len(cells),
            len(contours),
        )
        return CoverageDiff(retracted=retracted, cells=cells, contours=contours)

    def render_station(self, station: BaseStation) -> CoverageDiff:
        """Retract everything emitted for the station, then render its antennas."""
        diff = CoverageDiff(retracted=self.clear_station(station))
        for antenna in station.antennas:
            diff = diff.merge(self.render_antenna(station, antenna))
        return diff

    def clear_antenna(self, antenna_id: str) -> tuple[GeometryKey, ...]:
        """Forget an antenna's geometry and return the keys to remove."""
        for station_id, antenna_ids in list(self._station_antennas.items()):
            if antenna_id in antenna_ids:
                antenna_ids.remove(antenna_id)
                if not antenna_ids:
                    del self._station_antennas[station_id]
        return self._emitted.pop(antenna_id, ())

    def clear_station(self, station: BaseStation | str) -> tuple[GeometryKey, ...]:
        """Retract every antenna previously emitted for the station.

        Accepts the station or its id; the station's current antenna list
        is not consulted.
        """
        station_id = station if isinstance(station, str) else station.id
        retracted: tuple[GeometryKey, ...] = ()
        for antenna_id in self.station_antenna_ids(station_id):
            retracted += self.clear_antenna(antenna_id)
        return retracted

    def clear_all(self) -> tuple[GeometryKey, ...]:
        retracted = tuple(key for keys in self._emitted.values() for key in keys)
        self._emitted.clear()
        self._station_antennas.clear()
        logger.debug("Cleared %d geometry keys", len(retracted))
        return retracted
