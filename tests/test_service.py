"""Unit tests for FlightService orchestration."""

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from flightlink.aggregate.errors import (
    MissingCredential,
    ProviderUnavailable,
    TransportFailure,
    UpstreamError,
)
from flightlink.aggregate.models import Flight
from flightlink.aggregate.service import FlightService, build_provider, build_service
from flightlink.aggregate.sources import AeroDataBoxSource, AviationStackSource, OpenSkySource
from flightlink.aggregate.store import InMemoryFlightStore, JsonFileFlightStore
from flightlink.config import Settings


def _provider(name: str = "mock", credentialed: bool = True) -> MagicMock:
    provider = MagicMock()
    provider.name = name
    provider.has_credential.return_value = credentialed
    return provider


@pytest.fixture
def seed(make_flight, lax):
    return [
        make_flight(flight_number="AA100", airline="American Airlines"),
        make_flight(flight_number="UA555", airline="United Airlines", origin=lax),
    ]


class TestProviderSelection:
    """Tests for active provider selection."""

    def test_first_credentialed_provider(self, seed) -> None:
        """Providers without credentials are skipped at construction."""
        keyless = _provider("a", credentialed=False)
        keyed = _provider("b")
        other = _provider("c")
        service = FlightService(providers=[keyless, keyed, other], seed_flights=seed)
        assert service.active_provider is keyed

    def test_none_credentialed(self, seed) -> None:
        """No credentialed provider means local-only mode."""
        service = FlightService(providers=[_provider(credentialed=False)], seed_flights=seed)
        assert service.active_provider is None


class TestSearch:
    """Tests for FlightService.search."""

    def test_user_flights_first_without_dedup(self, make_flight, seed) -> None:
        """Matching user flights precede provider results and duplicates are kept."""
        user = make_flight(flight_number="AA100")
        p1, p2 = make_flight(flight_number="AA100"), make_flight(flight_number="AA1000")
        provider = _provider()
        provider.search_flights.return_value = [p1, p2]

        service = FlightService(
            providers=[provider], store=InMemoryFlightStore([user]), seed_flights=seed
        )
        result = service.search("  AA100 ")

        assert result == [user, p1, p2]
        provider.search_flights.assert_called_once_with("AA100")
        assert service.last_error is None

    def test_non_matching_user_flights_omitted(self, make_flight, seed) -> None:
        """User flights that do not match the query are not merged in."""
        user = make_flight(flight_number="DL9", airline="Delta Air Lines")
        provider = _provider()
        provider.search_flights.return_value = []
        service = FlightService(
            providers=[provider], store=InMemoryFlightStore([user]), seed_flights=seed
        )
        assert service.search("UA555") == []

    def test_transport_failure_falls_back(self, seed) -> None:
        """A transport failure serves local data and leaves the provider active."""
        provider = _provider("aviationstack")
        provider.search_flights.side_effect = TransportFailure(OSError("down"), provider="aviationstack")
        service = FlightService(providers=[provider], seed_flights=seed)

        result = service.search("United")

        assert [f.flight_number for f in result] == ["UA555"]
        assert isinstance(service.last_error, ProviderUnavailable)
        assert isinstance(service.last_error.__cause__, TransportFailure)
        assert service.last_error_message.startswith("Network error:")
        assert service.active_provider is provider

    def test_transport_failure_on_flight_number(self, seed) -> None:
        """A failing provider still answers a flight-number search from local data."""
        provider = _provider("aviationstack")
        provider.search_flights.side_effect = TransportFailure(OSError("down"), provider="aviationstack")
        service = FlightService(providers=[provider], seed_flights=seed)

        result = service.search("AA100")

        assert result
        assert all(f in seed for f in result)
        assert service.active_provider is provider

        service.search("AA100")
        assert provider.search_flights.call_count == 2

    def test_missing_credential_deactivates(self, seed) -> None:
        """A missing credential switches the service to local data for good."""
        provider = _provider("aviationstack")
        provider.search_flights.side_effect = MissingCredential("aviationstack", "AVIATIONSTACK_API_KEY")
        service = FlightService(providers=[provider], seed_flights=seed)

        service.search("AA100")
        assert service.active_provider is None
        assert service.last_error is not None

        service.search("AA100")
        assert provider.search_flights.call_count == 1
        assert service.last_error is None

    def test_unexpected_exception_swallowed(self, seed) -> None:
        """Non-provider exceptions are recorded rather than raised."""
        provider = _provider()
        provider.search_flights.side_effect = RuntimeError("boom")
        service = FlightService(providers=[provider], seed_flights=seed)

        result = service.search("AA100")
        assert [f.flight_number for f in result] == ["AA100"]
        assert service.last_error_message == "boom"
        assert service.active_provider is provider

    def test_blank_query_is_local(self, seed, make_flight) -> None:
        """Blank queries never reach the provider and return all local flights."""
        provider = _provider()
        user = make_flight(flight_number="ZZ1")
        service = FlightService(
            providers=[provider], store=InMemoryFlightStore([user]), seed_flights=seed
        )
        result = service.search("   ")
        provider.search_flights.assert_not_called()
        assert result == [user] + seed

    def test_no_provider_is_local(self, seed) -> None:
        service = FlightService(seed_flights=seed)
        assert [f.flight_number for f in service.search("los angeles")] == ["AA100", "UA555"]
        assert service.last_error is None

    def test_error_reset_on_next_search(self, seed) -> None:
        """Each search starts with a clear error."""
        provider = _provider()
        provider.search_flights.side_effect = [UpstreamError(503), []]
        service = FlightService(providers=[provider], seed_flights=seed)

        service.search("AA100")
        assert service.last_error_message == "API error: HTTP 503"
        assert service.search("AA100") == []
        assert service.last_error is None


class TestGetFlight:
    """Tests for FlightService.get_flight."""

    def test_provider_result(self, make_flight, seed) -> None:
        found = make_flight(flight_number="AA100")
        provider = _provider()
        provider.get_flight.return_value = found
        service = FlightService(providers=[provider], seed_flights=seed)

        assert service.get_flight("AA100", date(2025, 6, 2)) is found
        provider.get_flight.assert_called_once_with("AA100", date(2025, 6, 2))

    def test_provider_miss_is_not_filled_locally(self, seed) -> None:
        """A clean provider miss is returned as-is."""
        provider = _provider()
        provider.get_flight.return_value = None
        service = FlightService(providers=[provider], seed_flights=seed)
        assert service.get_flight("AA100") is None

    def test_failure_falls_back_to_exact_match(self, seed) -> None:
        """On failure the lookup matches flight numbers exactly, ignoring case."""
        provider = _provider()
        provider.get_flight.side_effect = UpstreamError(500)
        service = FlightService(providers=[provider], seed_flights=seed)

        assert service.get_flight("ua555") is seed[1]
        assert service.get_flight("UA55") is None
        assert service.last_error is not None


class TestUserFlightsAndTrips:
    """Tests for user flight and trip management."""

    def test_add_and_delete_user_flight_persists(self, make_flight, seed) -> None:
        store = InMemoryFlightStore()
        service = FlightService(store=store, seed_flights=seed)
        flight = make_flight(flight_number="B6123")

        service.add_user_flight(flight)
        assert store.load_user_flights() == [flight]
        assert service.search_locally("b6")[0] is flight

        assert service.delete_user_flight(flight.id) is True
        assert service.delete_user_flight(flight.id) is False
        assert store.load_user_flights() == []

    def test_trips(self, make_flight, now, seed) -> None:
        service = FlightService(seed_flights=seed)
        soon = service.add_trip("Soon", [make_flight(scheduled_departure=now + timedelta(days=1))])
        later = service.add_trip("Later", [make_flight(scheduled_departure=now + timedelta(days=9))])
        older = service.add_trip("Older", [make_flight(scheduled_departure=now - timedelta(days=9))])
        old = service.add_trip("Old", [make_flight(scheduled_departure=now - timedelta(days=2))])

        assert service.upcoming_trips(now) == [soon, later]
        assert service.past_trips(now) == [old, older]

        extra = make_flight(scheduled_departure=now + timedelta(days=2))
        assert service.add_flight_to_trip(extra, soon.id) is True
        assert soon.flights[-1] is extra
        assert service.add_flight_to_trip(extra, "missing") is False

        assert service.delete_trip(later.id) is True
        assert service.delete_trip(later.id) is False
        assert later not in service.trips


class TestBuildService:
    """Tests for provider wiring from settings."""

    def test_build_provider(self) -> None:
        settings = Settings(aviationstack_api_key="k", timeout=7)
        source = build_provider("AviationStack", settings)
        assert isinstance(source, AviationStackSource)
        assert source.has_credential()
        assert source.timeout == 7

        assert isinstance(build_provider("opensky", settings), OpenSkySource)
        with pytest.raises(ValueError):
            build_provider("nope", settings)

    def test_unset_keys_are_not_read_from_environment(self, monkeypatch) -> None:
        """Unset settings do not leak in from the process environment."""
        monkeypatch.setenv("RAPIDAPI_KEY", "from-env")
        source = build_provider("aerodatabox", Settings())
        assert isinstance(source, AeroDataBoxSource)
        assert not source.has_credential()

    def test_build_service(self, tmp_path) -> None:
        settings = Settings(
            rapidapi_key="rk",
            providers=["aviationstack", "aerodatabox"],
            store_path=str(tmp_path / "flights.json"),
        )
        service = build_service(settings)
        assert isinstance(service.active_provider, AeroDataBoxSource)
        assert isinstance(service._store, JsonFileFlightStore)
        assert service.user_flights == ()
        assert len(service.seed_flights) == 8
        assert all(isinstance(f, Flight) for f in service.seed_flights)
