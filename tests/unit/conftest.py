import numpy as np
import pytest

from src.uncertain import primitives
from src.uncertain.graph import IdAllocator


@pytest.fixture(autouse=True)
def seeded_shared_rng():
    """Pin the process-wide generator so statistical assertions are reproducible."""
    primitives.reseed(20240611)
    yield
    primitives.reseed(None)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def allocator():
    return IdAllocator()


class FixedSamples:
    """Stand-in exposing take(n); cycles through a fixed list of values."""

    def __init__(self, values):
        self.values = list(values)

    def take(self, n):
        return [self.values[i % len(self.values)] for i in range(n)]


@pytest.fixture
def fixed_samples():
    return FixedSamples
