"""
Pytest configuration and fixtures for HyperMind tests.
"""

import os
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

# Add project root to path so the hypermind package imports without install
sys.path.insert(0, str(Path(__file__).parent.parent))

# -----------------------------------------------------------------------------
# Hypothesis Profiles for Test Performance
# -----------------------------------------------------------------------------
# Usage: HYPOTHESIS_PROFILE=fast pytest tests/
#
# Profiles:
#   fast   - 10 examples, minimal phases (quick iteration)
#   dev    - 50 examples, standard phases (default for local development)
#   ci     - 100 examples, all phases, no deadline (thorough CI testing)
# -----------------------------------------------------------------------------

settings.register_profile(
    "fast",
    max_examples=10,
    phases=[Phase.generate],
    verbosity=Verbosity.quiet,
    deadline=None,
)

settings.register_profile(
    "dev",
    max_examples=50,
    phases=[Phase.generate, Phase.target, Phase.shrink],
    verbosity=Verbosity.normal,
    deadline=None,
)

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.generate, Phase.target, Phase.shrink, Phase.explain],
    verbosity=Verbosity.normal,
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

from hypermind import ContextGraph, HyperMind, ScopeStack, TierStore


class FakeClock:
    """Deterministic clock; every call returns the current fake time."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def store(clock):
    """Provide an empty TierStore on the fake clock."""
    return TierStore(clock=clock)


@pytest.fixture
def graph():
    """Provide an empty ContextGraph."""
    return ContextGraph()


@pytest.fixture
def stack(store, graph, clock):
    """Provide a ScopeStack wired to the store and graph fixtures."""
    return ScopeStack(store, graph, clock=clock)


@pytest.fixture
def mind(clock):
    """Provide a HyperMind instance, closed after the test."""
    instance = HyperMind(clock=clock)
    yield instance
    instance.close()


# Markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "hypothesis: property-based tests")
    config.addinivalue_line("markers", "slow: tests that take >1s")
