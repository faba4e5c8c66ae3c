"""Domain Port(s) for the station inventory.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete storage here.

Mutating operations return the new (or removed) entity; callers decide when
to refresh coverage. There is no change-notification side channel.
"""

from __future__ import annotations

from typing import Any, Protocol

from .value_objects import Antenna, BaseStation


class StationRepository(Protocol):
    """Port for storing base stations and their antennas.

    Implementations live in infrastructure (e.g., in-memory adapter).
    """

    def add_station(self, station: BaseStation) -> BaseStation:
        """Register a new station and return it."""
        ...

    def get_station(self, station_id: str) -> BaseStation:
        """Return the station with station_id."""
        ...

    def list_stations(self) -> tuple[BaseStation, ...]:
        """Return all stations in insertion order."""
        ...

    def update_station(self, station_id: str, **changes: Any) -> BaseStation:
        """Apply field changes and return the updated station."""
        ...

    def remove_station(self, station_id: str) -> BaseStation:
        """Remove a station (and its antennas) and return it."""
        ...

    def add_antenna(self, station_id: str, antenna: Antenna) -> BaseStation:
        """Attach antenna to a station and return the updated station."""
        ...

    def remove_antenna(self, station_id: str, antenna_id: str) -> BaseStation:
        """Detach an antenna and return the updated station."""
        ...
