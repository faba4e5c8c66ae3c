"""Terrain Bounded Context - Domain Services.

Pure spatial calculations on a spherical Earth.
NO I/O operations.

The sphere (radius 6 371 000 m) is an approximation: adequate at the scale
of single-site coverage (tens of km), not for geodesic-precision work.
"""

from __future__ import annotations

import math

from pyproj import Geod

from domain.terrain.value_objects import GeoPoint, WorldPoint

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
EARTH_RADIUS_M = 6_371_000.0  # Mean Earth radius in meters

# Sphere, not WGS84: a == b gives great-circle (haversine) results
_geod = Geod(a=EARTH_RADIUS_M, b=EARTH_RADIUS_M)


def _wrap_longitude(longitude: float) -> float:
    if longitude > 180.0:
        return longitude - 360.0
    if longitude < -180.0:
        return longitude + 360.0
    return longitude


# ---------------------------------------------------------------------------
# Distances
# ---------------------------------------------------------------------------
def haversine_distance(start: GeoPoint, end: GeoPoint) -> float:
    """Great-circle distance between two points in meters."""
    _, _, distance = _geod.inv(
        start.longitude, start.latitude, end.longitude, end.latitude
    )
    return float(abs(distance))


def distance_3d(start: WorldPoint, end: WorldPoint) -> float:
    """Straight-line distance combining great-circle and height difference.

    The horizontal haversine distance and the vertical height difference are
    treated as orthogonal legs: sqrt(horizontal^2 + dh^2).

    Args:
        start: First point (height in meters)
        end: Second point (height in meters)

    Returns:
        Distance in meters (always >= 0)
    """
    horizontal = haversine_distance(start, end)
    height_diff = end.height - start.height
    return math.sqrt(horizontal * horizontal + height_diff * height_diff)


# ---------------------------------------------------------------------------
# Spherical Projection
# ---------------------------------------------------------------------------
def spherical_projection(
    origin: WorldPoint,
    distance_m: float,
    azimuth_deg: float,
    elevation_deg: float,
) -> WorldPoint:
    """Project a point outward from origin along a bearing and tilt.

    The slant distance is split into a horizontal leg distance*cos(elevation),
    travelled along the great circle with the given bearing, and a vertical
    offset distance*sin(elevation) added to the origin height.

    Args:
        origin: Start position (antenna location)
        distance_m: Slant distance in meters
        azimuth_deg: Bearing in degrees, 0 = north, clockwise
        elevation_deg: Tilt in degrees, 0 = horizontal, positive = up

    Returns:
        Projected WorldPoint. Longitude is wrapped back into [-180, 180].

    Example:
        >>> antenna = WorldPoint(latitude=39.9, longitude=116.4, height=50.0)
        >>> p = spherical_projection(antenna, 1000.0, 90.0, 0.0)
        >>> round(p.height, 6)
        50.0
    """
    horizontal = distance_m * math.cos(math.radians(elevation_deg))
    vertical = distance_m * math.sin(math.radians(elevation_deg))

    longitude, latitude, _ = _geod.fwd(
        origin.longitude, origin.latitude, azimuth_deg, horizontal
    )

    return WorldPoint(
        latitude=float(latitude),
        longitude=_wrap_longitude(float(longitude)),
        height=origin.height + vertical,
    )
