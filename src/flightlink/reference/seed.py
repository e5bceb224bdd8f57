"""Static reference airports and illustrative flights used when no provider is available."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from flightlink.aggregate.models import Airport, Flight, FlightStatus

SEED_AIRPORTS: tuple[Airport, ...] = (
    Airport("JFK", "John F. Kennedy International Airport", "New York", "USA", "America/New_York", 40.6413, -73.7781),
    Airport("LAX", "Los Angeles International Airport", "Los Angeles", "USA", "America/Los_Angeles", 33.9416, -118.4085),
    Airport("ORD", "O'Hare International Airport", "Chicago", "USA", "America/Chicago", 41.9742, -87.9073),
    Airport("SFO", "San Francisco International Airport", "San Francisco", "USA", "America/Los_Angeles", 37.6213, -122.3790),
    Airport("MIA", "Miami International Airport", "Miami", "USA", "America/New_York", 25.7959, -80.2870),
    Airport("DFW", "Dallas/Fort Worth International Airport", "Dallas", "USA", "America/Chicago", 32.8998, -97.0403),
    Airport("LHR", "London Heathrow Airport", "London", "UK", "Europe/London", 51.4700, -0.4543),
    Airport("CDG", "Charles de Gaulle Airport", "Paris", "France", "Europe/Paris", 49.0097, 2.5479),
    Airport("NRT", "Narita International Airport", "Tokyo", "Japan", "Asia/Tokyo", 35.7720, 140.3929),
    Airport("DXB", "Dubai International Airport", "Dubai", "UAE", "Asia/Dubai", 25.2532, 55.3657),
    Airport("BOG", "El Dorado International Airport", "Bogotá", "Colombia", "America/Bogota", 4.7016, -74.1469),
    Airport(
        "SAL",
        "Monseñor Óscar Arnulfo Romero International Airport",
        "San Salvador",
        "El Salvador",
        "America/El_Salvador",
        13.4409,
        -89.0556,
    ),
)

_BY_CODE: Dict[str, Airport] = {a.code: a for a in SEED_AIRPORTS}


def get_seed_airport(code: str) -> Optional[Airport]:
    """Look up a reference airport by IATA code. Returns None if not found."""
    if not code:
        return None
    return _BY_CODE.get(code.upper().strip())


def _day(now: datetime, days: int, hour: float) -> datetime:
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight + timedelta(days=days, hours=hour)


def seed_flights(now: Optional[datetime] = None) -> List[Flight]:
    """Build the illustrative flights, scheduled relative to now."""
    now = now or datetime.now(timezone.utc)
    ap = _BY_CODE
    flights: List[Flight] = []

    # Upcoming, with an explicit boarding time
    dep = _day(now, 3, 8)
    flights.append(
        Flight(
            flight_number="AA100",
            airline="American Airlines",
            origin=ap["JFK"],
            destination=ap["LAX"],
            scheduled_departure=dep,
            scheduled_arrival=dep + timedelta(hours=6),
            status=FlightStatus.SCHEDULED,
            departure_gate="B22",
            departure_terminal="8",
            arrival_gate="52A",
            arrival_terminal="4",
            baggage_claim="3",
            aircraft="Boeing 777-300ER",
            boarding_time=dep - timedelta(minutes=40),
        )
    )

    dep = _day(now, 5, 14)
    flights.append(
        Flight(
            flight_number="UA555",
            airline="United Airlines",
            origin=ap["LAX"],
            destination=ap["SFO"],
            scheduled_departure=dep,
            scheduled_arrival=dep + timedelta(hours=1.5),
            status=FlightStatus.SCHEDULED,
            departure_gate="C10",
            departure_terminal="7",
            arrival_gate="3",
            arrival_terminal="International",
            baggage_claim="7",
            aircraft="Airbus A320",
            boarding_time=dep - timedelta(minutes=30),
        )
    )

    # Delayed by 90 minutes
    dep = _day(now, 1, 10)
    flights.append(
        Flight(
            flight_number="DL200",
            airline="Delta Air Lines",
            origin=ap["ORD"],
            destination=ap["MIA"],
            scheduled_departure=dep,
            scheduled_arrival=dep + timedelta(hours=3),
            actual_departure=dep + timedelta(hours=1.5),
            status=FlightStatus.DELAYED,
            departure_gate="A15",
            departure_terminal="2",
            arrival_gate="D8",
            arrival_terminal="North",
            baggage_claim="4",
            aircraft="Boeing 737-800",
            delay=90,
        )
    )

    # Airborne
    dep = now - timedelta(hours=4)
    flights.append(
        Flight(
            flight_number="NH7",
            airline="ANA",
            origin=ap["SFO"],
            destination=ap["NRT"],
            scheduled_departure=dep,
            scheduled_arrival=dep + timedelta(hours=11),
            actual_departure=dep,
            status=FlightStatus.IN_AIR,
            departure_gate="G1",
            departure_terminal="International",
            arrival_gate="24",
            arrival_terminal="1",
            baggage_claim="8",
            aircraft="Boeing 787-9 Dreamliner",
        )
    )

    # Landed ten minutes early
    dep = _day(now, -2, 12)
    arr = dep + timedelta(hours=8)
    flights.append(
        Flight(
            flight_number="BA117",
            airline="British Airways",
            origin=ap["LHR"],
            destination=ap["JFK"],
            scheduled_departure=dep,
            scheduled_arrival=arr,
            actual_departure=dep,
            actual_arrival=arr - timedelta(minutes=10),
            status=FlightStatus.LANDED,
            departure_gate="A12",
            departure_terminal="5",
            arrival_gate="D7",
            arrival_terminal="7",
            baggage_claim="5",
            aircraft="Airbus A350-1000",
        )
    )

    dep = _day(now, 7, 18)
    flights.append(
        Flight(
            flight_number="AF356",
            airline="Air France",
            origin=ap["DFW"],
            destination=ap["CDG"],
            scheduled_departure=dep,
            scheduled_arrival=dep + timedelta(hours=10),
            status=FlightStatus.SCHEDULED,
            departure_gate="E20",
            departure_terminal="D",
            arrival_gate="2F",
            arrival_terminal="2E",
            baggage_claim="6",
            aircraft="Boeing 777-200ER",
        )
    )

    dep = _day(now, 10, 22)
    flights.append(
        Flight(
            flight_number="EK213",
            airline="Emirates",
            origin=ap["MIA"],
            destination=ap["DXB"],
            scheduled_departure=dep,
            scheduled_arrival=dep + timedelta(hours=14),
            status=FlightStatus.SCHEDULED,
            departure_gate="D12",
            departure_terminal="South",
            arrival_gate="B5",
            arrival_terminal="3",
            baggage_claim="12",
            aircraft="Airbus A380-800",
        )
    )

    dep = _day(now, 2, 9)
    flights.append(
        Flight(
            flight_number="AV118",
            airline="Avianca",
            origin=ap["BOG"],
            destination=ap["SAL"],
            scheduled_departure=dep,
            scheduled_arrival=dep + timedelta(hours=2.5),
            status=FlightStatus.SCHEDULED,
            departure_gate="A8",
            departure_terminal="1",
            arrival_gate="12",
            arrival_terminal="Main",
            baggage_claim="2",
            aircraft="Airbus A320",
            boarding_time=dep - timedelta(minutes=35),
        )
    )

    return flights
