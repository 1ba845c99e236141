"""
Pytest fixtures for trip scheduling tests.
"""

import sys
from pathlib import Path

import pytest

# Add both tests dir and parent dir to path
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import START, make_request
from drivetime.scheduling import ReducedRestTracker, TripScheduler


@pytest.fixture
def scheduler():
    """TripScheduler instance."""
    return TripScheduler()


@pytest.fixture
def start_time():
    """Fixed trip start (2023-01-01 00:00 UTC)."""
    return START


@pytest.fixture
def request_factory():
    """Factory for TripRequest objects with overridable defaults."""
    return make_request


@pytest.fixture
def tracker():
    """Fresh reduced-rest tracker (no reductions used this week)."""
    return ReducedRestTracker()
