"""Tower Planner Domain Layer.

This package contains the core business logic organized by bounded contexts:
- terrain: Spherical geometry, distances, point projection
- coverage: RF propagation, signal strength, pathloss models, beam sampling
- siting: Base stations, antennas and their beam configuration
"""

# Imports alphabetized per project style (isort)
from domain import coverage, siting, terrain

__all__ = ["coverage", "siting", "terrain"]
