"""Free-text query normalization: flight numbers, airline codes, query classification."""

import re
from dataclasses import dataclass
from typing import Literal, Optional

from flightlink.reference.airlines import airline_code_for_name, icao_to_iata

_IATA_FLIGHT_RE = re.compile(r"^[A-Z]{2}[0-9]")
_ICAO_FLIGHT_RE = re.compile(r"^[A-Z]{3}[0-9]")
_CODE_RE = re.compile(r"^[A-Z]{2,3}$")


def normalize_flight_number(raw: str) -> str:
    """Trim and upper-case a flight number, rewriting known ICAO carrier prefixes to IATA.

    'ASA103' -> 'AS103'; 'AS103' and unmapped prefixes like 'ZZZ999' are unchanged.
    """
    trimmed = (raw or "").strip().upper()

    if _IATA_FLIGHT_RE.match(trimmed):
        return trimmed

    if _ICAO_FLIGHT_RE.match(trimmed):
        iata = icao_to_iata(trimmed[:3])
        if iata:
            return iata + trimmed[3:]

    return trimmed


def infer_airline_code(text: str) -> Optional[str]:
    """Guess an airline code from free text ('Alaska' -> 'AS'). None when nothing fits."""
    trimmed = (text or "").strip()
    upper = trimmed.upper()

    if len(upper) <= 3 and _CODE_RE.match(upper):
        return upper

    return airline_code_for_name(upper)


@dataclass(frozen=True)
class QueryPlan:
    """A classified search query.

    kind is "flight_number" when the text contains a digit, "text" for any
    other non-blank query and "blank" otherwise.
    """

    kind: Literal["flight_number", "text", "blank"]
    text: str
    flight_number: Optional[str] = None
    airline_code: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        return self.kind == "blank"


def classify_query(query: str) -> QueryPlan:
    """Classify a raw user query."""
    trimmed = (query or "").strip()
    if not trimmed:
        return QueryPlan(kind="blank", text="")
    if any(ch.isdigit() for ch in trimmed):
        return QueryPlan(
            kind="flight_number",
            text=trimmed,
            flight_number=normalize_flight_number(trimmed),
        )
    return QueryPlan(kind="text", text=trimmed, airline_code=infer_airline_code(trimmed))
