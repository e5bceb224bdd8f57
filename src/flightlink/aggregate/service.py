"""Flight service - provider selection, merging with user flights, local fallback."""

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from flightlink.aggregate.errors import MissingCredential, ProviderError, ProviderUnavailable
from flightlink.aggregate.models import Flight, Trip
from flightlink.aggregate.sources import (
    AeroDataBoxSource,
    AviationStackSource,
    FlightProvider,
    FreeFlightSource,
    OpenSkySource,
)
from flightlink.aggregate.store import InMemoryFlightStore, JsonFileFlightStore, UserFlightStore
from flightlink.config import Settings
from flightlink.reference.seed import seed_flights as default_seed_flights

_LOG = logging.getLogger(__name__)


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in (haystack or "").casefold()


class FlightService:
    """Answers flight searches from the active provider, falling back to local data.

    The active provider is the first credentialed one at construction time.
    Searches never raise; the most recent provider failure is kept in
    ``last_error``.
    """

    def __init__(
        self,
        providers: Sequence[FlightProvider] = (),
        store: Optional[UserFlightStore] = None,
        seed_flights: Optional[Sequence[Flight]] = None,
    ):
        self.providers = list(providers)
        self._store = store if store is not None else InMemoryFlightStore()
        self._seed_flights = list(seed_flights) if seed_flights is not None else default_seed_flights()
        self._user_flights: List[Flight] = self._store.load_user_flights()
        self._trips: List[Trip] = []
        self.last_error: Optional[ProviderUnavailable] = None

        self.active_provider: Optional[FlightProvider] = next(
            (p for p in self.providers if p.has_credential()), None
        )
        if self.active_provider is None:
            _LOG.info("No credentialed flight provider; serving local data only")
        else:
            _LOG.info("Active flight provider: %s", self.active_provider.name)

    @property
    def last_error_message(self) -> Optional[str]:
        return str(self.last_error) if self.last_error else None

    @property
    def user_flights(self) -> Tuple[Flight, ...]:
        return tuple(self._user_flights)

    @property
    def seed_flights(self) -> Tuple[Flight, ...]:
        return tuple(self._seed_flights)

    # --- search ---------------------------------------------------------------

    def search(self, query: str) -> List[Flight]:
        """Search flights. Provider failures degrade to a local search."""
        self.last_error = None
        trimmed = (query or "").strip()
        provider = self.active_provider

        if provider is not None and provider.has_credential() and trimmed:
            try:
                provider_flights = provider.search_flights(trimmed)
            except Exception as e:
                self._record_failure(provider, e)
            else:
                return self._merge_user_flights(provider_flights, trimmed)

        return self.search_locally(trimmed)

    def search_locally(self, query: str) -> List[Flight]:
        """Case-insensitive substring search over user and seed flights."""
        all_flights = self._user_flights + self._seed_flights
        q = (query or "").strip()
        if not q:
            return list(all_flights)
        return [
            f for f in all_flights
            if _contains(f.flight_number, q)
            or _contains(f.airline, q)
            or _contains(f.origin.code, q)
            or _contains(f.destination.code, q)
            or _contains(f.origin.city, q)
            or _contains(f.destination.city, q)
        ]

    def get_flight(self, flight_number: str, flight_date: Optional[date] = None) -> Optional[Flight]:
        """Look up one flight: active provider first, else an exact flight-number match locally."""
        provider = self.active_provider
        if provider is not None and provider.has_credential():
            try:
                return provider.get_flight(flight_number, flight_date)
            except Exception as e:
                self._record_failure(provider, e)

        wanted = (flight_number or "").strip().upper()
        for f in self._user_flights + self._seed_flights:
            if f.flight_number.upper() == wanted:
                return f
        return None

    def _merge_user_flights(self, provider_flights: List[Flight], query: str) -> List[Flight]:
        """User flights matching the query first, then provider results. No de-duplication."""
        matching = [
            f for f in self._user_flights
            if not query
            or _contains(f.flight_number, query)
            or _contains(f.airline, query)
            or _contains(f.origin.code, query)
            or _contains(f.destination.code, query)
        ]
        return matching + list(provider_flights)

    def _record_failure(self, provider: FlightProvider, error: Exception) -> None:
        self.last_error = ProviderUnavailable.from_error(error, provider=provider.name)
        if not isinstance(error, ProviderError):
            _LOG.exception("%s raised an unexpected error, using local data", provider.name)
        elif isinstance(error, MissingCredential):
            _LOG.warning("%s: %s; switching to local data", provider.name, error)
            if self.active_provider is provider:
                self.active_provider = None
        else:
            _LOG.warning("%s failed, using local data for this call: %s", provider.name, error)

    # --- user flights ---------------------------------------------------------

    def add_user_flight(self, flight: Flight) -> None:
        self._user_flights.append(flight)
        self._store.save_user_flights(self._user_flights)

    def delete_user_flight(self, flight_id: str) -> bool:
        """Remove a user flight by id. Returns False when no flight had that id."""
        remaining = [f for f in self._user_flights if f.id != flight_id]
        if len(remaining) == len(self._user_flights):
            return False
        self._user_flights = remaining
        self._store.save_user_flights(self._user_flights)
        return True

    # --- trips ----------------------------------------------------------------

    @property
    def trips(self) -> Tuple[Trip, ...]:
        return tuple(self._trips)

    def add_trip(self, name: str, flights: Sequence[Flight]) -> Trip:
        trip = Trip(name=name, flights=list(flights))
        self._trips.append(trip)
        return trip

    def delete_trip(self, trip_id: str) -> bool:
        remaining = [t for t in self._trips if t.id != trip_id]
        deleted = len(remaining) != len(self._trips)
        self._trips = remaining
        return deleted

    def add_flight_to_trip(self, flight: Flight, trip_id: str) -> bool:
        for trip in self._trips:
            if trip.id == trip_id:
                trip.flights.append(flight)
                return True
        return False

    def upcoming_trips(self, now: Optional[datetime] = None) -> List[Trip]:
        """Trips not yet started or in progress, soonest first."""
        trips = [t for t in self._trips if t.is_upcoming(now) or t.is_in_progress(now)]
        return sorted(trips, key=lambda t: t.start_date())

    def past_trips(self, now: Optional[datetime] = None) -> List[Trip]:
        """Finished trips, most recent first."""
        trips = [t for t in self._trips if t.is_past(now)]
        return sorted(trips, key=lambda t: t.start_date(), reverse=True)


def build_provider(name: str, settings: Settings) -> FlightProvider:
    """Instantiate a provider by its configured name."""
    name = name.lower().strip()
    if name == "aviationstack":
        return AviationStackSource(api_key=settings.aviationstack_api_key or "", timeout=settings.timeout)
    if name == "aerodatabox":
        return AeroDataBoxSource(api_key=settings.rapidapi_key or "", timeout=settings.timeout)
    if name == "freeflight":
        return FreeFlightSource(timeout=settings.timeout)
    if name == "opensky":
        return OpenSkySource(
            username=settings.opensky_username or "",
            password=settings.opensky_password or "",
            timeout=settings.timeout,
        )
    raise ValueError(f"Unknown provider: {name}")


def build_service(settings: Optional[Settings] = None) -> FlightService:
    """Wire providers, the JSON file store and seed data from settings."""
    settings = settings or Settings.load()
    return FlightService(
        providers=[build_provider(n, settings) for n in settings.providers],
        store=JsonFileFlightStore(settings.store_path),
    )
