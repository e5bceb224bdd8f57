"""OpenSky Network live state-vector client.

OpenSky REST:
- states: GET https://opensky-network.org/api/states/all

Notes:
- Anonymous access works (heavily rate limited); HTTP basic auth via
  OPENSKY_USERNAME / OPENSKY_PASSWORD raises the limits.
- Each state vector is a positional JSON array of mixed types. It is decoded
  through STATE_VECTOR_SCHEMA, never by guessing types at runtime.
- OpenSky has no schedules or airports per aircraft, so flights built here
  carry position-only placeholder airports and a synthetic one-hour-either-side
  schedule.
"""

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from flightlink.aggregate.errors import MalformedResponse
from flightlink.aggregate.models import Airport, Flight, FlightStatus, UNKNOWN
from flightlink.aggregate.query import classify_query, normalize_flight_number
from flightlink.aggregate.sources.base import DEFAULT_TIMEOUT, fetch_json
from flightlink.reference.airlines import get_airline_by_iata

_LOG = logging.getLogger(__name__)

OPENSKY_BASE = "https://opensky-network.org/api"
LIVE_FLIGHT_LIMIT = 20

StateValue = Union[str, int, float, bool, None]

# position -> (field, expected type, required)
STATE_VECTOR_SCHEMA: Tuple[Tuple[str, type, bool], ...] = (
    ("icao24", str, True),
    ("callsign", str, False),
    ("origin_country", str, True),
    ("time_position", int, False),
    ("last_contact", int, True),
    ("longitude", float, False),
    ("latitude", float, False),
    ("baro_altitude", float, False),
    ("on_ground", bool, True),
    ("velocity", float, False),
    ("true_track", float, False),
    ("vertical_rate", float, False),
)


class StateVectorError(ValueError):
    """A state vector does not match STATE_VECTOR_SCHEMA."""


def decode_value(value: Any, expected: type, required: bool) -> StateValue:
    """Check one positional value against its schema type."""
    if value is None:
        if required:
            raise StateVectorError("required value is null")
        return None
    if expected is bool:
        if isinstance(value, bool):
            return value
    elif expected is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif expected is float:
        # JSON numbers without a fraction arrive as int
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif expected is str:
        if isinstance(value, str):
            return value
    raise StateVectorError(f"expected {expected.__name__}, got {type(value).__name__}")


@dataclass(frozen=True)
class StateVector:
    """Decoded OpenSky state vector (first 12 positions)."""

    icao24: str
    callsign: Optional[str]
    origin_country: str
    time_position: Optional[int]
    last_contact: int
    longitude: Optional[float]
    latitude: Optional[float]
    baro_altitude: Optional[float]
    on_ground: bool
    velocity: Optional[float]
    true_track: Optional[float]
    vertical_rate: Optional[float]

    @classmethod
    def from_row(cls, row: Any) -> "StateVector":
        """Decode a positional row. Raises StateVectorError on shape or type mismatch."""
        if not isinstance(row, list) or len(row) < len(STATE_VECTOR_SCHEMA):
            raise StateVectorError("state vector too short")
        values: Dict[str, StateValue] = {}
        for position, (field_name, expected, required) in enumerate(STATE_VECTOR_SCHEMA):
            try:
                values[field_name] = decode_value(row[position], expected, required)
            except StateVectorError as e:
                raise StateVectorError(f"position {position} ({field_name}): {e}") from e
        return cls(**values)


class OpenSkySource:
    """Live airborne flights from OpenSky, matched by callsign."""

    name = "opensky"

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        base_url: str = OPENSKY_BASE,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.username = username if username is not None else os.environ.get("OPENSKY_USERNAME")
        self.password = password if password is not None else os.environ.get("OPENSKY_PASSWORD")
        self.base_url = base_url
        self.timeout = timeout
        self._auth = (self.username, self.password) if (self.username and self.password) else None

    def has_credential(self) -> bool:
        """Anonymous access is allowed."""
        return True

    def search_flights(self, query: str) -> List[Flight]:
        """Live flights whose normalized callsign equals the normalized query."""
        plan = classify_query(query)
        if plan.is_blank:
            return self.get_live_flights()
        wanted = plan.flight_number or normalize_flight_number(plan.text)
        return [
            f for f in self._airborne(limit=None)
            if f.flight_number == wanted
        ][:LIVE_FLIGHT_LIMIT]

    def get_flight(
        self, flight_number: str, flight_date: Optional[date] = None
    ) -> Optional[Flight]:
        """First live match; only the current day is observable."""
        flights = self.search_flights(flight_number)
        return flights[0] if flights else None

    def get_live_flights(self, limit: int = LIVE_FLIGHT_LIMIT) -> List[Flight]:
        """Up to `limit` airborne flights from the current state snapshot."""
        return self._airborne(limit=limit)

    def _airborne(self, limit: Optional[int]) -> List[Flight]:
        data = fetch_json(
            f"{self.base_url}/states/all", self.name, auth=self._auth, timeout=self.timeout
        )
        if not isinstance(data, dict):
            raise MalformedResponse("expected a JSON object", provider=self.name)
        states = data.get("states") or []
        if not isinstance(states, list):
            raise MalformedResponse("'states' is not a list", provider=self.name)

        now = datetime.now(timezone.utc)
        flights: List[Flight] = []
        for row in states:
            flight = self.state_to_flight(row, now)
            if flight is not None:
                flights.append(flight)
                if limit is not None and len(flights) >= limit:
                    break
        return flights

    def state_to_flight(self, row: Any, now: Optional[datetime] = None) -> Optional[Flight]:
        """Convert one state vector, or None when it is malformed, grounded or anonymous."""
        try:
            state = StateVector.from_row(row)
        except StateVectorError as e:
            _LOG.debug("%s: dropped state vector: %s", self.name, e)
            return None

        callsign = (state.callsign or "").strip()
        if not callsign or state.latitude is None or state.longitude is None:
            return None
        if state.on_ground:
            return None

        now = now or datetime.now(timezone.utc)
        flight_number = normalize_flight_number(callsign)
        airline = get_airline_by_iata(flight_number[:2])

        current = Airport(
            code="---",
            name=UNKNOWN,
            city="In Flight",
            latitude=state.latitude,
            longitude=state.longitude,
        )
        projected = Airport(
            code="???",
            name="Unknown Destination",
            latitude=state.latitude + 5.0,
            longitude=state.longitude + 5.0,
        )

        return Flight(
            flight_number=flight_number,
            airline=airline.name if airline else UNKNOWN,
            origin=current,
            destination=projected,
            scheduled_departure=now - timedelta(hours=1),
            scheduled_arrival=now + timedelta(hours=1),
            status=FlightStatus.IN_AIR,
        )
