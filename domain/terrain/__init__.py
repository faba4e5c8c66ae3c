"""Terrain Bounded Context.

Responsible for physical geography and spatial calculations:
- Value Objects: GeoPoint, WorldPoint, BoundingBox
- Services: haversine/3D distance, spherical projection
"""
