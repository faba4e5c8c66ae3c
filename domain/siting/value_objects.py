"""Siting Bounded Context - Value Objects.

Immutable records for base stations, their antennas and the beam
discretization used to visualize each antenna. A station exclusively owns
its antennas; changing either produces a new object.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.coverage.value_objects import PropagationModel
from domain.terrain.value_objects import WorldPoint


# ---------------------------------------------------------------------------
# BeamConfig
# ---------------------------------------------------------------------------
class BeamConfig(BaseModel):
    """Discretization of one antenna's visualized beam (Value Object).

    The horizontal and vertical beam widths are centred on the antenna's
    azimuth and elevation and split into `horizontal_steps` and
    `vertical_steps` equal angular bins. The radial extent [0, max_distance_m]
    is split into fixed shells by the sampler.
    """

    enabled: bool = True
    horizontal_beam_width_deg: float = Field(default=120.0, gt=0, le=360)
    vertical_beam_width_deg: float = Field(default=30.0, gt=0, le=180)
    horizontal_steps: int = Field(default=12, ge=1)  # 10 deg per bin by default
    vertical_steps: int = Field(default=30, ge=1)  # 1 deg per layer by default
    max_distance_m: float = Field(default=5000.0, gt=0)
    transparency: float = Field(default=0.6, ge=0, le=1)
    show_contours: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def horizontal_step_deg(self) -> float:
        return self.horizontal_beam_width_deg / self.horizontal_steps

    @property
    def vertical_step_deg(self) -> float:
        return self.vertical_beam_width_deg / self.vertical_steps


# ---------------------------------------------------------------------------
# Antenna
# ---------------------------------------------------------------------------
class Antenna(BaseModel):
    """Directional transmitter mounted on a base station (Value Object).

    Angles are degrees: azimuth 0 = north (clockwise), elevation 0 = horizontal.
    `height_m` is measured from the owning station, not from sea level.
    The id must be unique across the whole dataset: rendered geometry is
    correlated back to its antenna through it.
    """

    id: str = Field(min_length=1)
    azimuth_deg: float
    elevation_deg: float = 0.0
    height_m: float = 0.0  # Height above station
    transmit_power_dbm: float
    gain_dbi: float = 0.0
    frequency_mhz: float
    propagation_model: PropagationModel
    beam: BeamConfig = Field(default_factory=BeamConfig)

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# BaseStation
# ---------------------------------------------------------------------------
class BaseStation(BaseModel):
    """Cell site with an ordered set of antennas (Value Object).

    Invariants:
        latitude in [-90, 90], longitude in [-180, 180]
        antenna ids unique within the station
    """

    id: str = Field(min_length=1)
    name: str = ""
    longitude: float = Field(ge=-180, le=180)
    latitude: float = Field(ge=-90, le=90)
    height_m: float = 0.0  # Height above sea level
    antennas: tuple[Antenna, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_antenna_ids(self) -> "BaseStation":
        ids = [a.id for a in self.antennas]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate antenna ids in station {self.id}: {ids}")
        return self

    def antenna_position(self, antenna: Antenna) -> WorldPoint:
        """World position of an antenna: station location, stacked heights."""
        return WorldPoint(
            latitude=self.latitude,
            longitude=self.longitude,
            height=self.height_m + antenna.height_m,
        )

    def antenna(self, antenna_id: str) -> Antenna | None:
        """Return the antenna with antenna_id, or None."""
        for antenna in self.antennas:
            if antenna.id == antenna_id:
                return antenna
        return None

    def with_antenna(self, antenna: Antenna) -> "BaseStation":
        """Return a copy of this station with antenna appended."""
        return self._with_antennas((*self.antennas, antenna))

    def without_antenna(self, antenna_id: str) -> "BaseStation":
        """Return a copy of this station without antenna_id (no-op if absent)."""
        return self._with_antennas(
            tuple(a for a in self.antennas if a.id != antenna_id)
        )

    def _with_antennas(self, antennas: tuple[Antenna, ...]) -> "BaseStation":
        # Re-run validation so the uniqueness invariant holds on the copy
        return BaseStation(
            id=self.id,
            name=self.name,
            longitude=self.longitude,
            latitude=self.latitude,
            height_m=self.height_m,
            antennas=antennas,
        )
