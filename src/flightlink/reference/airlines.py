"""Airline code lookups (ICAO prefix to IATA, airline name to IATA)."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AirlineInfo:
    """Airline details from reference data."""

    iata: str
    icao: str
    name: str


_AIRLINES: tuple[AirlineInfo, ...] = (
    AirlineInfo(iata="AS", icao="ASA", name="Alaska Airlines"),
    AirlineInfo(iata="DL", icao="DAL", name="Delta Air Lines"),
    AirlineInfo(iata="UA", icao="UAL", name="United Airlines"),
    AirlineInfo(iata="AA", icao="AAL", name="American Airlines"),
    AirlineInfo(iata="WN", icao="SWA", name="Southwest Airlines"),
    AirlineInfo(iata="B6", icao="JBU", name="JetBlue Airways"),
)

# Only these prefixes are rewritten when a flight number is typed ICAO-style.
_ICAO_TO_IATA: dict[str, str] = {
    "ASA": "AS",
    "DAL": "DL",
    "UAL": "UA",
    "AAL": "AA",
}

# Keys are upper-cased; lookups must upper-case too.
_NAME_TO_IATA: dict[str, str] = {
    "ALASKA": "AS",
    "ALASKA AIRLINES": "AS",
    "DELTA": "DL",
    "DELTA AIR LINES": "DL",
    "AMERICAN": "AA",
    "AMERICAN AIRLINES": "AA",
    "UNITED": "UA",
    "UNITED AIRLINES": "UA",
    "SOUTHWEST": "WN",
    "SOUTHWEST AIRLINES": "WN",
    "JETBLUE": "B6",
    "JETBLUE AIRWAYS": "B6",
}


def icao_to_iata(icao: str) -> Optional[str]:
    """Convert a 3-letter ICAO carrier prefix to its IATA code. Returns None if not mapped."""
    if not icao:
        return None
    return _ICAO_TO_IATA.get(icao.upper().strip())


def airline_code_for_name(name: str) -> Optional[str]:
    """Exact (case-insensitive) airline name lookup. Returns None if not found."""
    if not name:
        return None
    return _NAME_TO_IATA.get(" ".join(name.upper().split()))


def get_airline_by_iata(iata: str) -> Optional[AirlineInfo]:
    """Look up airline by IATA 2-letter code. Returns None if not found."""
    if not iata:
        return None
    iata = iata.upper().strip()
    for info in _AIRLINES:
        if info.iata == iata:
            return info
    return None
