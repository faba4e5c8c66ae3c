"""Coverage Bounded Context - Error Hierarchy.

Custom exceptions for coverage operations. Numeric degeneracies (zero
distance, non-positive frequency, out-of-envelope parameters) are NOT
errors: they degrade to defined values inside the propagation models.
"""

from __future__ import annotations


class CoverageError(Exception):
    """Base error for coverage operations."""


class UnknownPropagationModelError(CoverageError):
    """Requested propagation model kind is not in the catalog.

    Attributes:
        kind: The kind that was looked up
    """

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unknown propagation model: {kind!r}")
