"""Root pytest configuration for all tests.

Provides a reference station/antenna pair and a seeded random generator.
Builders live in tests/conftest_utils.py for tests that need variants.
"""

import numpy as np
import pytest

from domain.siting.value_objects import Antenna, BaseStation
from tests.conftest_utils import make_antenna, make_station


@pytest.fixture
def antenna() -> Antenna:
    return make_antenna()


@pytest.fixture
def station(antenna: Antenna) -> BaseStation:
    return make_station(antennas=(antenna,))


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so ray-tracing results are repeatable within a test."""
    return np.random.default_rng(42)
