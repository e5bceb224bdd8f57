"""Keyless flight lookup client (aviationapi.com).

No authentication. The endpoint has returned both a bare JSON array of
records and an object wrapping them under ``data``; both are accepted.
Airport codes are resolved against the seed airport table before a
placeholder is synthesized.
"""

from datetime import date
from typing import Any, List, Optional

from flightlink.aggregate.cache import AirportCache
from flightlink.aggregate.errors import InvalidRequest, MalformedResponse
from flightlink.aggregate.models import Flight, FlightStatus
from flightlink.aggregate.sources.base import (
    DEFAULT_TIMEOUT,
    fetch_json,
    get_str,
    log_dropped,
    parse_timestamp,
)
from flightlink.reference.seed import get_seed_airport
from flightlink.reference.status import DEFAULT_STATUS_RULES, map_status

BASE_URL = "https://api.aviationapi.com/v1/flights"

# Anything mentioning "air" (e.g. "in air") also counts as airborne here.
STATUS_RULES = DEFAULT_STATUS_RULES[:1] + (
    (("active", "airborne", "en-route", "air"), FlightStatus.IN_AIR),
) + DEFAULT_STATUS_RULES[2:]


class FreeFlightSource:
    """Flight data provider for the free aviationapi.com flights endpoint."""

    name = "freeflight"

    def __init__(self, base_url: str = BASE_URL, timeout: int = DEFAULT_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout
        self.airports = AirportCache(reference=get_seed_airport)

    def has_credential(self) -> bool:
        """No key is needed."""
        return True

    def search_flights(self, query: str) -> List[Flight]:
        trimmed = (query or "").strip()
        if not trimmed:
            raise InvalidRequest("A flight query is required", provider=self.name)

        data = fetch_json(
            self.base_url, self.name, params={"flight": trimmed}, timeout=self.timeout
        )
        records = self._records(data)

        flights = []
        for record in records:
            flight = self.record_to_flight(record)
            if flight is not None:
                flights.append(flight)
        log_dropped(self.name, len(records) - len(flights), len(records))
        return flights

    def get_flight(
        self, flight_number: str, flight_date: Optional[date] = None
    ) -> Optional[Flight]:
        """First search result for the flight number; the date is not supported by this API."""
        flights = self.search_flights(flight_number)
        return flights[0] if flights else None

    def _records(self, data: Any) -> List[Any]:
        if data is None:
            return []
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            records = data.get("data")
            if records is None:
                return []
            if isinstance(records, list):
                return records
        raise MalformedResponse("expected a list of flights", provider=self.name)

    def record_to_flight(self, record: Any) -> Optional[Flight]:
        """Convert one raw record, or None when identity fields are missing or unparseable."""
        if not isinstance(record, dict):
            return None

        flight_number = get_str(record, "flight_number")
        airline = get_str(record, "airline")
        origin_code = get_str(record, "departure_airport")
        destination_code = get_str(record, "arrival_airport")
        scheduled_departure = parse_timestamp(record.get("departure_time"))
        scheduled_arrival = parse_timestamp(record.get("arrival_time"))

        if not (
            flight_number
            and airline
            and origin_code
            and destination_code
            and scheduled_departure
            and scheduled_arrival
        ):
            return None

        return Flight(
            flight_number=flight_number,
            airline=airline,
            origin=self._airport(origin_code),
            destination=self._airport(destination_code),
            scheduled_departure=scheduled_departure,
            scheduled_arrival=scheduled_arrival,
            status=map_status(get_str(record, "status"), STATUS_RULES),
            departure_gate=get_str(record, "gate"),
            departure_terminal=get_str(record, "terminal"),
        )

    def _airport(self, code: str):
        code = code.upper()
        return self.airports.resolve(code, name=f"{code} Airport", city=code)
