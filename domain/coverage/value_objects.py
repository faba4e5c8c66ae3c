"""Coverage Bounded Context - Value Objects.

Immutable results of propagation and beam sampling. Nothing here is cached
or mutated: every query produces fresh objects.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from domain.terrain.value_objects import BoundingBox, WorldPoint


# ---------------------------------------------------------------------------
# Propagation Model
# ---------------------------------------------------------------------------
class PropagationModelKind(str, Enum):
    """Closed catalog of supported propagation models."""

    FREE_SPACE = "free-space"
    COST231_HATA = "cost-231-hata"
    ITU_INDOOR = "itu-indoor"
    RAY_TRACING = "ray-tracing"


class PropagationModel(BaseModel):
    """Catalog entry describing a propagation model (Value Object).

    `parameters` carries model-specific tunables, e.g. city_type for
    COST-231-Hata or wall_loss/floors for the ITU indoor model. Stored as a
    read-only mapping.
    """

    kind: PropagationModelKind
    name: str
    description: str = ""
    parameters: Mapping[str, float] = Field(
        default_factory=dict, validate_default=True
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("parameters", mode="after")
    @classmethod
    def freeze_parameters(cls, value: Mapping[str, float]) -> Mapping[str, float]:
        return MappingProxyType(dict(value))

    @field_serializer("parameters")
    def serialize_parameters(self, value: Mapping[str, float]) -> dict[str, float]:
        return dict(value)

    def parameter(self, key: str, default: float) -> float:
        """Return a tunable, falling back to default only when absent."""
        value = self.parameters.get(key)
        return default if value is None else float(value)


# ---------------------------------------------------------------------------
# SignalEstimate
# ---------------------------------------------------------------------------
class SignalEstimate(BaseModel):
    """Received-signal estimate for one antenna at one target point.

    All numeric fields are rounded to 2 decimals by the producer.
    A path loss of exactly 0 may indicate degenerate geometry (target
    coincident with the antenna) rather than a real measurement.
    """

    rssi_dbm: float
    distance_m: float = Field(ge=0)
    path_loss_db: float
    antenna_id: str
    station_id: str
    model_name: str

    model_config = ConfigDict(frozen=True)


class SignalBand(str, Enum):
    """Qualitative signal level used by renderers to pick a colour."""

    EXCELLENT = "excellent"  # > -60 dBm
    GOOD = "good"  # > -70 dBm
    FAIR = "fair"  # > -80 dBm
    WEAK = "weak"  # > -90 dBm
    VERY_WEAK = "very_weak"  # > -100 dBm
    NO_SIGNAL = "no_signal"


# Lower (exclusive) thresholds, strongest first
SIGNAL_BAND_THRESHOLDS_DBM: tuple[tuple[float, SignalBand], ...] = (
    (-60.0, SignalBand.EXCELLENT),
    (-70.0, SignalBand.GOOD),
    (-80.0, SignalBand.FAIR),
    (-90.0, SignalBand.WEAK),
    (-100.0, SignalBand.VERY_WEAK),
)


def classify_rssi(rssi_dbm: float) -> SignalBand:
    """Map an RSSI value onto its SignalBand."""
    for threshold, band in SIGNAL_BAND_THRESHOLDS_DBM:
        if rssi_dbm > threshold:
            return band
    return SignalBand.NO_SIGNAL


# ---------------------------------------------------------------------------
# Composite keys
# ---------------------------------------------------------------------------
class CellKey(NamedTuple):
    """Stable identifier of one coverage cell."""

    antenna_id: str
    h_index: int
    v_index: int
    d_index: int


class ContourKind(str, Enum):
    RANGE = "range"
    BEARING = "bearing"


class ContourKey(NamedTuple):
    """Stable identifier of one contour polyline."""

    antenna_id: str
    kind: ContourKind
    index: int


# ---------------------------------------------------------------------------
# CoverageCell
# ---------------------------------------------------------------------------
class CoverageCell(BaseModel):
    """One (azimuth x elevation x range) bin of an antenna's beam.

    Carries the bin's angular/radial extent, the projected bin centre, a
    closed boundary loop for filled-polygon renderers and the signal
    estimate evaluated at the centre.
    """

    key: CellKey
    station_id: str
    azimuth_bounds: tuple[float, float]  # degrees (start, end)
    elevation_bounds: tuple[float, float]  # degrees (start, end)
    distance_bounds: tuple[float, float]  # meters (inner, outer)
    center: WorldPoint
    boundary: tuple[WorldPoint, ...]
    estimate: SignalEstimate

    model_config = ConfigDict(frozen=True)

    @property
    def rssi_dbm(self) -> float:
        return self.estimate.rssi_dbm

    @property
    def band(self) -> SignalBand:
        return classify_rssi(self.estimate.rssi_dbm)


# ---------------------------------------------------------------------------
# ContourLine
# ---------------------------------------------------------------------------
class ContourLine(BaseModel):
    """Polyline of equal range or equal bearing.

    `value` is the range in meters for RANGE contours and the bearing in
    degrees for BEARING contours.
    """

    key: ContourKey
    value: float
    points: tuple[WorldPoint, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_points(self) -> "ContourLine":
        if len(self.points) < 2:
            raise ValueError(f"Contour needs >= 2 points, got {len(self.points)}")
        return self

    @property
    def kind(self) -> ContourKind:
        return self.key.kind


# ---------------------------------------------------------------------------
# CoverageGrid
# ---------------------------------------------------------------------------
class CoverageGrid(BaseModel):
    """Best-server RSSI sampled on a regular lat/lon lattice (Value Object).

    Row 0 is the northern edge (max_y), column 0 the western edge (min_x).
    Cells with no serving antenna hold NaN. The array is read-only.
    """

    data: NDArray[np.float64]  # 2D (rows x cols) best RSSI in dBm
    bounds: BoundingBox
    target_height: float  # Receiver height in meters

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_grid(self) -> "CoverageGrid":
        if self.data.ndim != 2:
            raise ValueError(f"Data must be 2D, got {self.data.ndim}D")
        if self.data.shape[0] < 2 or self.data.shape[1] < 2:
            raise ValueError(f"Grid needs at least 2x2 samples: {self.data.shape}")

        # Owned, contiguous float64 copy; never flip flags on caller arrays
        immutable = np.array(self.data, dtype=np.float64, copy=True, order="C")
        immutable.flags.writeable = False
        object.__setattr__(self, "data", immutable)
        return self

    @property
    def shape(self) -> tuple[int, int]:
        rows, cols = self.data.shape
        return (int(rows), int(cols))

    def best_rssi(self) -> float:
        """Strongest RSSI anywhere on the grid (NaN if nothing is served)."""
        if np.isnan(self.data).all():
            return math.nan
        return float(np.nanmax(self.data))

    def covered_ratio(self, threshold_dbm: float) -> float:
        """Fraction of samples whose RSSI is at or above threshold_dbm."""
        with np.errstate(invalid="ignore"):
            covered = np.count_nonzero(self.data >= threshold_dbm)
        return covered / self.data.size
