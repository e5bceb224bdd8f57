"""Canonical, provider-agnostic data models."""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

UNKNOWN = "Unknown"
DEFAULT_TIMEZONE = "UTC"

# Minutes late before a flight counts as delayed / early before it counts as early.
DELAY_THRESHOLD_MINUTES = 15
EARLY_THRESHOLD_MINUTES = 5
DEFAULT_BOARDING_LEAD = timedelta(minutes=40)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, floored."""
    return math.floor((end - start).total_seconds() / 60)


@dataclass(frozen=True)
class Airport:
    """Airport value. Only `code` is guaranteed meaningful; the rest may be placeholders."""

    code: str
    name: str = UNKNOWN
    city: str = UNKNOWN
    country: str = UNKNOWN
    timezone: str = DEFAULT_TIMEZONE
    latitude: float = 0.0
    longitude: float = 0.0

    def __post_init__(self):
        if not self.code or not self.code.strip():
            raise ValueError("Airport code must be non-empty")


class FlightStatus(str, Enum):
    """Closed status taxonomy every provider vocabulary maps onto."""

    SCHEDULED = "Scheduled"
    BOARDING = "Boarding"
    DEPARTED = "Departed"
    IN_AIR = "In Air"
    LANDED = "Landed"
    DELAYED = "Delayed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class TimeStatus:
    """Derived punctuality of a flight."""

    kind: Literal["on_time", "early", "delayed"]
    minutes: int = 0

    @classmethod
    def on_time(cls) -> "TimeStatus":
        return cls(kind="on_time")

    @classmethod
    def early(cls, minutes: int) -> "TimeStatus":
        return cls(kind="early", minutes=minutes)

    @classmethod
    def delayed(cls, minutes: int) -> "TimeStatus":
        return cls(kind="delayed", minutes=minutes)

    @classmethod
    def from_minutes(cls, minutes: int) -> "TimeStatus":
        """Classify a signed lateness in minutes."""
        if minutes > DELAY_THRESHOLD_MINUTES:
            return cls.delayed(minutes)
        if minutes < -EARLY_THRESHOLD_MINUTES:
            return cls.early(abs(minutes))
        return cls.on_time()

    @property
    def display_text(self) -> str:
        if self.kind == "early":
            return f"Early by {self.minutes} min"
        if self.kind == "delayed":
            return f"Delayed {self.minutes} min"
        return "On Time"


@dataclass(frozen=True)
class Flight:
    """Canonical flight record.

    `id` is opaque and unique per record; the same flight number recurs
    across carriers and dates so it cannot serve as identity. Optional
    fields are None when the source did not report them.
    """

    flight_number: str
    airline: str
    origin: Airport
    destination: Airport
    scheduled_departure: datetime
    scheduled_arrival: datetime
    status: FlightStatus = FlightStatus.SCHEDULED
    actual_departure: Optional[datetime] = None
    actual_arrival: Optional[datetime] = None
    departure_gate: Optional[str] = None
    departure_terminal: Optional[str] = None
    arrival_gate: Optional[str] = None
    arrival_terminal: Optional[str] = None
    baggage_claim: Optional[str] = None
    aircraft: Optional[str] = None
    delay: Optional[int] = None
    boarding_time: Optional[datetime] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def route(self) -> str:
        """Return route as ORIGIN-DESTINATION."""
        return f"{self.origin.code}-{self.destination.code}"

    def departure_time(self) -> datetime:
        """Actual departure if known, else scheduled."""
        return self.actual_departure or self.scheduled_departure

    def arrival_time(self) -> datetime:
        """Actual arrival if known, else scheduled."""
        return self.actual_arrival or self.scheduled_arrival

    def duration(self) -> timedelta:
        return self.arrival_time() - self.departure_time()

    def is_upcoming(self, now: Optional[datetime] = None) -> bool:
        return self.scheduled_departure > (now or _now())

    def is_past(self, now: Optional[datetime] = None) -> bool:
        return self.scheduled_arrival < (now or _now())

    def estimated_boarding_time(self) -> datetime:
        """Reported boarding time, or 40 minutes before scheduled departure."""
        if self.boarding_time is not None:
            return self.boarding_time
        return self.scheduled_departure - DEFAULT_BOARDING_LEAD

    def time_status(self) -> TimeStatus:
        """Punctuality from the reported delay, else actual vs scheduled departure, else arrival.

        A signal that classifies as on time defers to the next one, so a flight
        that left on schedule but landed early reads as early.
        """
        candidates = [self.delay]
        if self.actual_departure is not None:
            candidates.append(minutes_between(self.scheduled_departure, self.actual_departure))
        if self.actual_arrival is not None:
            candidates.append(minutes_between(self.scheduled_arrival, self.actual_arrival))

        for minutes in candidates:
            if minutes is None:
                continue
            status = TimeStatus.from_minutes(minutes)
            if status.kind != "on_time":
                return status
        return TimeStatus.on_time()


@dataclass
class Trip:
    """Ordered itinerary of flights."""

    name: str
    flights: List[Flight] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        # Own a private copy of the sequence handed in.
        self.flights = list(self.flights)

    def start_date(self) -> Optional[datetime]:
        return self.flights[0].scheduled_departure if self.flights else None

    def end_date(self) -> Optional[datetime]:
        return self.flights[-1].scheduled_arrival if self.flights else None

    def is_upcoming(self, now: Optional[datetime] = None) -> bool:
        start = self.start_date()
        return start is not None and start > (now or _now())

    def is_in_progress(self, now: Optional[datetime] = None) -> bool:
        start, end = self.start_date(), self.end_date()
        if start is None or end is None:
            return False
        now = now or _now()
        return start <= now <= end

    def is_past(self, now: Optional[datetime] = None) -> bool:
        end = self.end_date()
        return end is not None and end < (now or _now())

    def layovers(self) -> List[Tuple[Flight, Flight, timedelta]]:
        """Gaps between consecutive flights, from scheduled times only."""
        return [
            (current, nxt, nxt.scheduled_departure - current.scheduled_arrival)
            for current, nxt in zip(self.flights, self.flights[1:])
        ]


# --- JSON-serializable encoding -------------------------------------------------

_DATETIME_FIELDS = (
    "scheduled_departure",
    "scheduled_arrival",
    "actual_departure",
    "actual_arrival",
    "boarding_time",
)
_OPTIONAL_TEXT_FIELDS = (
    "departure_gate",
    "departure_terminal",
    "arrival_gate",
    "arrival_terminal",
    "baggage_claim",
    "aircraft",
)


def airport_to_dict(airport: Airport) -> Dict[str, Any]:
    return {
        "code": airport.code,
        "name": airport.name,
        "city": airport.city,
        "country": airport.country,
        "timezone": airport.timezone,
        "latitude": airport.latitude,
        "longitude": airport.longitude,
    }


def airport_from_dict(data: Dict[str, Any]) -> Airport:
    return Airport(
        code=data["code"],
        name=data.get("name", UNKNOWN),
        city=data.get("city", UNKNOWN),
        country=data.get("country", UNKNOWN),
        timezone=data.get("timezone", DEFAULT_TIMEZONE),
        latitude=float(data.get("latitude", 0.0)),
        longitude=float(data.get("longitude", 0.0)),
    )


def flight_to_dict(flight: Flight) -> Dict[str, Any]:
    """Encode a Flight as plain JSON types."""
    out: Dict[str, Any] = {
        "id": flight.id,
        "flight_number": flight.flight_number,
        "airline": flight.airline,
        "origin": airport_to_dict(flight.origin),
        "destination": airport_to_dict(flight.destination),
        "status": flight.status.value,
        "delay": flight.delay,
    }
    for name in _DATETIME_FIELDS:
        value = getattr(flight, name)
        out[name] = value.isoformat() if value is not None else None
    for name in _OPTIONAL_TEXT_FIELDS:
        out[name] = getattr(flight, name)
    return out


def flight_from_dict(data: Dict[str, Any]) -> Flight:
    """Decode a Flight written by flight_to_dict. Raises KeyError/ValueError on bad input."""
    times = {
        name: datetime.fromisoformat(data[name]) if data.get(name) else None
        for name in _DATETIME_FIELDS
    }
    if times["scheduled_departure"] is None or times["scheduled_arrival"] is None:
        raise ValueError("Flight record is missing scheduled times")
    delay = data.get("delay")
    return Flight(
        id=data["id"],
        flight_number=data["flight_number"],
        airline=data["airline"],
        origin=airport_from_dict(data["origin"]),
        destination=airport_from_dict(data["destination"]),
        status=FlightStatus(data.get("status", FlightStatus.SCHEDULED.value)),
        delay=int(delay) if delay is not None else None,
        **times,
        **{name: data.get(name) for name in _OPTIONAL_TEXT_FIELDS},
    )


_DATAFRAME_COLUMNS = [
    "flight_number",
    "airline",
    "origin",
    "destination",
    "scheduled_departure",
    "scheduled_arrival",
    "status",
    "time_status",
    "departure_gate",
    "aircraft",
]


def flights_to_dataframe(flights: Sequence[Flight]):
    """Convert flights to a pandas DataFrame."""
    import pandas as pd

    if not flights:
        return pd.DataFrame(columns=_DATAFRAME_COLUMNS)
    return pd.DataFrame(
        [
            {
                "flight_number": f.flight_number,
                "airline": f.airline,
                "origin": f.origin.code,
                "destination": f.destination.code,
                "scheduled_departure": f.scheduled_departure,
                "scheduled_arrival": f.scheduled_arrival,
                "status": f.status.value,
                "time_status": f.time_status().display_text,
                "departure_gate": f.departure_gate,
                "aircraft": f.aircraft,
            }
            for f in flights
        ],
        columns=_DATAFRAME_COLUMNS,
    )
