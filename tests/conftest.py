"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure src is on path when running tests without installed package
src = Path(__file__).resolve().parent.parent / "src"
if src.exists() and str(src) not in sys.path:
    sys.path.insert(0, str(src))

from flightlink.aggregate.models import Airport, Flight, FlightStatus  # noqa: E402


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def jfk() -> Airport:
    return Airport("JFK", "John F. Kennedy International Airport", "New York", "USA", "America/New_York", 40.6413, -73.7781)


@pytest.fixture
def lax() -> Airport:
    return Airport("LAX", "Los Angeles International Airport", "Los Angeles", "USA", "America/Los_Angeles", 33.9416, -118.4085)


@pytest.fixture
def make_flight(jfk, lax, now):
    """Factory for flights departing JFK for LAX one day after `now`."""

    def _make(**overrides) -> Flight:
        departure = overrides.pop("scheduled_departure", now + timedelta(days=1))
        fields = dict(
            flight_number="AA100",
            airline="American Airlines",
            origin=jfk,
            destination=lax,
            scheduled_departure=departure,
            scheduled_arrival=departure + timedelta(hours=6),
            status=FlightStatus.SCHEDULED,
        )
        fields.update(overrides)
        return Flight(**fields)

    return _make


@pytest.fixture
def json_response():
    """Factory for a mocked requests.Response whose .json() returns payload."""

    def _make(payload, status_code: int = 200) -> MagicMock:
        resp = MagicMock()
        resp.status_code = status_code
        resp.json.return_value = payload
        return resp

    return _make
