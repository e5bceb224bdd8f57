"""AeroDataBox (RapidAPI) flight status client.

Requires a RapidAPI key (set RAPIDAPI_KEY env var), sent in the
X-RapidAPI-Key header.

Endpoint:
  Flight by number: /flights/number/{flightNumber}/{YYYY-MM-DD}

Times are read from the ``utc`` member of scheduledTime/actualTime, which
may be ISO 8601 or the provider's short "YYYY-MM-DD HH:MMZ" form.
"""

import logging
import os
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from flightlink.aggregate.cache import AirportCache
from flightlink.aggregate.errors import InvalidRequest, MalformedResponse, MissingCredential
from flightlink.aggregate.models import Flight
from flightlink.aggregate.query import classify_query, normalize_flight_number
from flightlink.aggregate.sources.base import (
    DEFAULT_TIMEOUT,
    ISO_TIMESTAMP_FORMATS,
    fetch_json,
    get_dict,
    get_float,
    get_str,
    log_dropped,
    parse_timestamp,
    resolve_delay,
)
from flightlink.reference.status import map_status

_LOG = logging.getLogger(__name__)

BASE_URL = "https://aerodatabox.p.rapidapi.com"
RAPIDAPI_HOST = "aerodatabox.p.rapidapi.com"
API_KEY_ENV = "RAPIDAPI_KEY"

TIMESTAMP_FORMATS = ISO_TIMESTAMP_FORMATS + ("%Y-%m-%d %H:%M%z",)


class AeroDataBoxSource:
    """Flight data provider backed by AeroDataBox flight-by-number lookups."""

    name = "aerodatabox"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key if api_key is not None else os.environ.get(API_KEY_ENV, "")
        self.base_url = base_url
        self.timeout = timeout
        self.airports = AirportCache()

    def has_credential(self) -> bool:
        return bool(self.api_key)

    def set_api_key(self, api_key: str) -> None:
        self.api_key = api_key

    def search_flights(self, query: str) -> List[Flight]:
        """Search by flight number for today. Airline or free-text queries are not supported."""
        self._require_key()
        plan = classify_query(query)
        if plan.kind != "flight_number":
            raise InvalidRequest(
                f"{self.name} can only search by flight number, got {query!r}",
                provider=self.name,
            )
        return self._flights_by_number(plan.flight_number, None)

    def get_flight(
        self, flight_number: str, flight_date: Optional[date] = None
    ) -> Optional[Flight]:
        self._require_key()
        number = normalize_flight_number(flight_number)
        if not number:
            raise InvalidRequest("Flight number is required", provider=self.name)
        flights = self._flights_by_number(number, flight_date)
        return flights[0] if flights else None

    def _require_key(self) -> None:
        if not self.api_key:
            raise MissingCredential(provider=self.name, setting=API_KEY_ENV)

    def _headers(self) -> dict:
        return {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": RAPIDAPI_HOST,
            "Accept": "application/json",
        }

    def _flights_by_number(self, flight_number: str, flight_date: Optional[date]) -> List[Flight]:
        day = flight_date or datetime.now(timezone.utc).date()
        number = "".join(flight_number.split())
        url = f"{self.base_url}/flights/number/{number}/{day.strftime('%Y-%m-%d')}"
        _LOG.debug("%s: GET %s", self.name, url)

        data = fetch_json(url, self.name, headers=self._headers(), timeout=self.timeout)
        if data is None:
            return []
        if not isinstance(data, list):
            raise MalformedResponse("expected a JSON array", provider=self.name)

        flights = []
        for record in data:
            flight = self.record_to_flight(record)
            if flight is not None:
                flights.append(flight)
        log_dropped(self.name, len(data) - len(flights), len(data))
        return flights

    def record_to_flight(self, record: Any) -> Optional[Flight]:
        """Convert one raw record, or None when identity fields are missing or unparseable."""
        if not isinstance(record, dict):
            return None

        departure = get_dict(record, "departure")
        arrival = get_dict(record, "arrival")
        dep_airport = get_dict(departure, "airport")
        arr_airport = get_dict(arrival, "airport")

        # "DL 200" -> "DL200"
        flight_number = "".join((get_str(record, "number") or "").split())
        airline_name = get_str(get_dict(record, "airline"), "name")
        origin_code = get_str(dep_airport, "iata")
        destination_code = get_str(arr_airport, "iata")
        scheduled_departure = self._utc(departure, "scheduledTime")
        scheduled_arrival = self._utc(arrival, "scheduledTime")

        if not (
            flight_number
            and airline_name
            and origin_code
            and destination_code
            and scheduled_departure
            and scheduled_arrival
        ):
            return None

        origin = self._resolve_airport(origin_code, dep_airport)
        destination = self._resolve_airport(destination_code, arr_airport)
        actual_departure = self._utc(departure, "actualTime")
        actual_arrival = self._utc(arrival, "actualTime")

        return Flight(
            flight_number=flight_number,
            airline=airline_name,
            origin=origin,
            destination=destination,
            scheduled_departure=scheduled_departure,
            scheduled_arrival=scheduled_arrival,
            actual_departure=actual_departure,
            actual_arrival=actual_arrival,
            status=map_status(get_str(record, "status")),
            departure_gate=get_str(departure, "gate"),
            departure_terminal=get_str(departure, "terminal"),
            arrival_gate=get_str(arrival, "gate"),
            arrival_terminal=get_str(arrival, "terminal"),
            baggage_claim=get_str(arrival, "baggageBelt"),
            aircraft=get_str(get_dict(record, "aircraft"), "model"),
            delay=resolve_delay(None, scheduled_departure, actual_departure),
        )

    def _resolve_airport(self, code: str, airport: dict):
        location = get_dict(airport, "location")
        return self.airports.resolve(
            code,
            name=get_str(airport, "name"),
            city=get_str(airport, "municipalityName"),
            timezone=get_str(airport, "timeZone"),
            latitude=get_float(location, "lat"),
            longitude=get_float(location, "lon"),
        )

    @staticmethod
    def _utc(leg: dict, key: str) -> Optional[datetime]:
        return parse_timestamp(get_dict(leg, key).get("utc"), TIMESTAMP_FORMATS)
