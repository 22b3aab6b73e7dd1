"""Pytest fixtures for all tests."""

import random

import pytest

from generation.entropy import fast_entropy
from utils.timestamp import Instant

# 2021-12-31T23:59:59Z
FIXED_SECONDS = 1640995199


class SequenceClock:
    """Clock that replays the given instants, cycling when exhausted."""

    def __init__(self, instants):
        self.instants = list(instants)
        self.calls = 0

    def __call__(self):
        instant = self.instants[self.calls % len(self.instants)]
        self.calls += 1
        return instant


@pytest.fixture
def rng():
    """Seeded PRNG for reproducible test data."""
    return random.Random(1234)


@pytest.fixture
def entropy():
    """Deterministic entropy source."""
    return fast_entropy(seed=42)


@pytest.fixture
def zero_entropy():
    """Entropy source that always returns zero bytes."""
    return lambda n: bytes(n)


@pytest.fixture
def fixed_instant():
    return Instant(FIXED_SECONDS, 0)


@pytest.fixture
def fixed_clock(fixed_instant):
    """Clock stuck on one instant."""
    return SequenceClock([fixed_instant])


@pytest.fixture
def sequence_clock():
    """Build a clock replaying whole seconds."""
    def build(seconds):
        return SequenceClock(Instant(s, 0) for s in seconds)
    return build
