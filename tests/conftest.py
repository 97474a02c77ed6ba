import numpy as np
import pytest


class FakeClock:
    """Clock that only moves when told to."""
    def __init__(self, start=0):
        self.t = start

    def now_ms(self):
        return self.t

    def advance(self, ms):
        self.t += ms


class StubRng:
    """Returns the same uniform and normal draw every time."""
    def __init__(self, uniform=0.5, normal=0.0):
        self.uniform = uniform
        self.normal = normal

    def random(self, n):
        return np.full(n, self.uniform)

    def standard_normal(self, n):
        return np.full(n, self.normal)


@pytest.fixture
def clock():
    return FakeClock(start=1_000)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
