"""AviationStack flights API client.

Data source: https://aviationstack.com/ (REST, JSON).
Requires an API key (set AVIATIONSTACK_API_KEY env var), sent as the
``access_key`` query parameter.

Endpoint:
  Flights: /v1/flights?access_key=...&flight_iata=...&search=...

Errors are reported either as non-200 statuses or as a 200 body carrying
an ``error`` object.
"""

import logging
import os
from datetime import date
from typing import Any, Dict, List, Optional

from flightlink.aggregate.cache import AirportCache
from flightlink.aggregate.errors import (
    InvalidRequest,
    MalformedResponse,
    MissingCredential,
    UpstreamError,
)
from flightlink.aggregate.models import Flight
from flightlink.aggregate.query import QueryPlan, classify_query, normalize_flight_number
from flightlink.aggregate.sources.base import (
    DEFAULT_TIMEOUT,
    fetch_json,
    get_dict,
    get_str,
    log_dropped,
    parse_timestamp,
    resolve_delay,
)
from flightlink.reference.status import map_status

_LOG = logging.getLogger(__name__)

BASE_URL = "https://api.aviationstack.com/v1"
FLIGHTS_ENDPOINT = f"{BASE_URL}/flights"
PAGE_LIMIT = 20
API_KEY_ENV = "AVIATIONSTACK_API_KEY"


class AviationStackSource:
    """Flight data provider backed by the AviationStack flights endpoint."""

    name = "aviationstack"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = FLIGHTS_ENDPOINT,
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
        """Search flights by flight number or airline/free text."""
        self._require_key()
        params = self.build_params(classify_query(query))
        return self._convert_batch(self._fetch(params))

    def get_flight(
        self, flight_number: str, flight_date: Optional[date] = None
    ) -> Optional[Flight]:
        """Return the first convertible record for a flight number (and optional date)."""
        self._require_key()
        number = normalize_flight_number(flight_number)
        if not number:
            raise InvalidRequest("Flight number is required", provider=self.name)
        params: Dict[str, Any] = {"access_key": self.api_key, "flight_iata": number}
        if flight_date is not None:
            params["flight_date"] = flight_date.strftime("%Y-%m-%d")

        for record in self._fetch(params):
            flight = self.record_to_flight(record)
            if flight is not None:
                return flight
        return None

    def build_params(self, plan: QueryPlan) -> Dict[str, Any]:
        """Translate a classified query into AviationStack query parameters."""
        params: Dict[str, Any] = {"access_key": self.api_key, "limit": str(PAGE_LIMIT)}
        if plan.kind == "flight_number":
            params["flight_iata"] = plan.flight_number
            # Free-text search as a fallback; the filter alone misses some carriers.
            params["search"] = plan.text
        elif plan.kind == "text":
            if plan.airline_code:
                params["airline_iata"] = plan.airline_code
            params["airline_name"] = plan.text
            params["search"] = plan.text
        return params

    def _require_key(self) -> None:
        if not self.api_key:
            raise MissingCredential(provider=self.name, setting=API_KEY_ENV)

    def _fetch(self, params: Dict[str, Any]) -> List[Any]:
        filters = sorted(k for k in params if k != "access_key")
        _LOG.debug("%s: GET %s filters=%s", self.name, self.base_url, filters)
        data = fetch_json(self.base_url, self.name, params=params, timeout=self.timeout)
        if data is None:
            return []
        if not isinstance(data, dict):
            raise MalformedResponse("expected a JSON object", provider=self.name)

        error = data.get("error")
        if isinstance(error, dict):
            message = get_str(error, "message", "info", "code") or "unknown error"
            raise UpstreamError(None, message, provider=self.name)

        records = data.get("data")
        if records is None:
            return []
        if not isinstance(records, list):
            raise MalformedResponse("'data' is not a list", provider=self.name)
        return records

    def _convert_batch(self, records: List[Any]) -> List[Flight]:
        flights = []
        for record in records:
            flight = self.record_to_flight(record)
            if flight is not None:
                flights.append(flight)
        log_dropped(self.name, len(records) - len(flights), len(records))
        return flights

    def record_to_flight(self, record: Any) -> Optional[Flight]:
        """Convert one raw record, or None when identity fields are missing or unparseable."""
        if not isinstance(record, dict):
            return None

        departure = get_dict(record, "departure")
        arrival = get_dict(record, "arrival")
        flight_info = get_dict(record, "flight")

        flight_number = get_str(flight_info, "iata", "number")
        airline_name = get_str(get_dict(record, "airline"), "name")
        origin_code = get_str(departure, "iata")
        destination_code = get_str(arrival, "iata")
        scheduled_departure = parse_timestamp(departure.get("scheduled"))
        scheduled_arrival = parse_timestamp(arrival.get("scheduled"))

        if not (
            flight_number
            and airline_name
            and origin_code
            and destination_code
            and scheduled_departure
            and scheduled_arrival
        ):
            return None

        origin = self.airports.resolve(
            origin_code,
            name=get_str(departure, "airport"),
            timezone=get_str(departure, "timezone"),
        )
        destination = self.airports.resolve(
            destination_code,
            name=get_str(arrival, "airport"),
            timezone=get_str(arrival, "timezone"),
        )

        actual_departure = parse_timestamp(departure.get("actual"))
        actual_arrival = parse_timestamp(arrival.get("actual"))
        reported_delay = departure.get("delay")
        if reported_delay is None:
            reported_delay = arrival.get("delay")

        aircraft = get_dict(record, "aircraft")

        return Flight(
            flight_number=flight_number,
            airline=airline_name,
            origin=origin,
            destination=destination,
            scheduled_departure=scheduled_departure,
            scheduled_arrival=scheduled_arrival,
            actual_departure=actual_departure,
            actual_arrival=actual_arrival,
            status=map_status(get_str(record, "flight_status")),
            departure_gate=get_str(departure, "gate"),
            departure_terminal=get_str(departure, "terminal"),
            arrival_gate=get_str(arrival, "gate"),
            arrival_terminal=get_str(arrival, "terminal"),
            baggage_claim=get_str(arrival, "baggage"),
            aircraft=get_str(aircraft, "iata", "icao"),
            delay=resolve_delay(reported_delay, scheduled_departure, actual_departure),
        )
