"""In-memory adapter for StationRepository.

Keeps stations in insertion order. Stations are immutable value objects, so
every mutation replaces the stored station and returns the new one; callers
refresh coverage explicitly with the returned entity.

Antenna ids are unique across the whole inventory, since rendered coverage
is keyed by antenna id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from domain.siting.errors import (
    AntennaNotFoundError,
    DuplicateAntennaError,
    DuplicateStationError,
    SitingError,
    StationNotFoundError,
)
from domain.siting.value_objects import Antenna, BaseStation

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)


class InMemoryStationRepository:
    """Infrastructure adapter storing base stations in a dict.

    Parameters
    ----------
    stations: iterable of BaseStation
        Optional initial inventory, registered through add_station so that
        id uniqueness is checked.
    """

    def __init__(self, stations: Iterable[BaseStation] = ()) -> None:
        self._stations: dict[str, BaseStation] = {}
        for station in stations:
            self.add_station(station)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_station(self, station_id: str) -> BaseStation:
        try:
            return self._stations[station_id]
        except KeyError:
            raise StationNotFoundError(station_id) from None

    def list_stations(self) -> tuple[BaseStation, ...]:
        return tuple(self._stations.values())

    def find_antenna(self, antenna_id: str) -> tuple[BaseStation, Antenna] | None:
        """Return (owning station, antenna) for antenna_id, or None."""
        for station in self._stations.values():
            antenna = station.antenna(antenna_id)
            if antenna is not None:
                return station, antenna
        return None

    @property
    def total_stations(self) -> int:
        return len(self._stations)

    @property
    def total_antennas(self) -> int:
        return sum(len(s.antennas) for s in self._stations.values())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_station(self, station: BaseStation) -> BaseStation:
        if station.id in self._stations:
            raise DuplicateStationError(station.id)
        for antenna in station.antennas:
            self._check_antenna_id_free(antenna.id)

        self._stations[station.id] = station
        logger.info(
            "Added station %s with %d antennas", station.id, len(station.antennas)
        )
        return station

    def update_station(self, station_id: str, **changes: Any) -> BaseStation:
        """Apply field changes to a station and return the validated result.

        Raises:
            StationNotFoundError: If station_id is unknown
            SitingError: If changes name unknown fields or alter the station id
            DuplicateAntennaError: If new antennas collide with another station
            ValueError: If the changed station violates its invariants
        """
        current = self.get_station(station_id)
        unknown = sorted(set(changes) - set(BaseStation.model_fields))
        if unknown:
            raise SitingError(f"Unknown station fields: {', '.join(unknown)}")
        if "id" in changes and changes["id"] != station_id:
            raise SitingError(f"Station id cannot be changed: {station_id}")

        if "antennas" in changes:
            for antenna in changes["antennas"]:
                if isinstance(antenna, Antenna):
                    antenna_id = antenna.id
                else:
                    antenna_id = antenna["id"]
                self._check_antenna_id_free(antenna_id, ignore_station=station_id)

        # model_copy(update=...) skips validation; rebuild instead
        data = {**current.model_dump(), **changes}
        updated = BaseStation.model_validate(data)

        self._stations[station_id] = updated
        logger.info("Updated station %s (%s)", station_id, ", ".join(sorted(changes)))
        return updated

    def remove_station(self, station_id: str) -> BaseStation:
        removed = self.get_station(station_id)
        del self._stations[station_id]
        logger.info(
            "Removed station %s and its %d antennas", station_id, len(removed.antennas)
        )
        return removed

    def add_antenna(self, station_id: str, antenna: Antenna) -> BaseStation:
        station = self.get_station(station_id)
        self._check_antenna_id_free(antenna.id)

        updated = station.with_antenna(antenna)
        self._stations[station_id] = updated
        logger.info("Added antenna %s to station %s", antenna.id, station_id)
        return updated

    def remove_antenna(self, station_id: str, antenna_id: str) -> BaseStation:
        station = self.get_station(station_id)
        if station.antenna(antenna_id) is None:
            raise AntennaNotFoundError(station_id, antenna_id)

        updated = station.without_antenna(antenna_id)
        self._stations[station_id] = updated
        logger.info("Removed antenna %s from station %s", antenna_id, station_id)
        return updated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_antenna_id_free(
        self, antenna_id: str, ignore_station: str | None = None
    ) -> None:
        for station in self._stations.values():
            if station.id == ignore_station:
                continue
            if station.antenna(antenna_id) is not None:
                raise DuplicateAntennaError(antenna_id, station.id)
