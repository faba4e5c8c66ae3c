"""Infrastructure for the coverage bounded context.

Render-side bookkeeping of emitted coverage geometry.
"""

from .layer import CoverageDiff, CoverageLayer

__all__ = ["CoverageDiff", "CoverageLayer"]
