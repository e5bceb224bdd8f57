"""Reference data: airline code tables, status vocabulary, seed airports and flights."""

from flightlink.reference.airlines import (
    AirlineInfo,
    airline_code_for_name,
    get_airline_by_iata,
    icao_to_iata,
)
from flightlink.reference.seed import SEED_AIRPORTS, get_seed_airport, seed_flights
from flightlink.reference.status import DEFAULT_STATUS_RULES, map_status

__all__ = [
    "AirlineInfo",
    "DEFAULT_STATUS_RULES",
    "SEED_AIRPORTS",
    "airline_code_for_name",
    "get_airline_by_iata",
    "get_seed_airport",
    "icao_to_iata",
    "map_status",
    "seed_flights",
]
