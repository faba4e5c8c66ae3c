"""Infrastructure adapters for the siting bounded context.

Adapter exported for simplified imports.
"""

from .memory_adapter import InMemoryStationRepository

__all__ = ["InMemoryStationRepository"]
