"""Siting Bounded Context - Error Hierarchy.

Custom exceptions for station inventory operations.
"""

from __future__ import annotations


class SitingError(Exception):
    """Base error for siting operations."""


class StationNotFoundError(SitingError):
    """No station with the given id exists.

    Attributes:
        station_id: The id that was looked up
    """

    def __init__(self, station_id: str) -> None:
        self.station_id = station_id
        super().__init__(f"Station not found: {station_id}")


class AntennaNotFoundError(SitingError):
    """Station exists but does not own the given antenna."""

    def __init__(self, station_id: str, antenna_id: str) -> None:
        self.station_id = station_id
        self.antenna_id = antenna_id
        super().__init__(f"Antenna {antenna_id} not found on station {station_id}")


class DuplicateStationError(SitingError):
    """A station with the same id is already registered."""

    def __init__(self, station_id: str) -> None:
        self.station_id = station_id
        super().__init__(f"Station already exists: {station_id}")


class DuplicateAntennaError(SitingError):
    """Antenna id is already used somewhere in the dataset."""

    def __init__(self, antenna_id: str, owner_id: str) -> None:
        self.antenna_id = antenna_id
        self.owner_id = owner_id
        super().__init__(
            f"Antenna id {antenna_id} already used by station {owner_id}"
        )
