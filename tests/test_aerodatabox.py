"""Unit tests for the AeroDataBox source."""

import copy
from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from flightlink.aggregate.errors import InvalidRequest, MalformedResponse, MissingCredential
from flightlink.aggregate.models import FlightStatus
from flightlink.aggregate.sources.aerodatabox import AeroDataBoxSource

GET = "flightlink.aggregate.sources.base.requests.get"

RECORD = {
    "number": "DL 200",
    "status": "Delayed",
    "airline": {"name": "Delta Air Lines", "iata": "DL", "icao": "DAL"},
    "aircraft": {"reg": "N123DL", "model": "Boeing 737-800"},
    "departure": {
        "airport": {
            "iata": "ORD",
            "name": "Chicago O'Hare",
            "municipalityName": "Chicago",
            "timeZone": "America/Chicago",
            "location": {"lat": 41.9786, "lon": -87.9048},
        },
        "scheduledTime": {"utc": "2025-06-02 15:00Z", "local": "2025-06-02 10:00-05:00"},
        "actualTime": {"utc": "2025-06-02 16:30Z"},
        "terminal": "2",
        "gate": "A15",
    },
    "arrival": {
        "airport": {"iata": "MIA", "name": "Miami"},
        "scheduledTime": {"utc": "2025-06-02T18:00:00Z"},
        "terminal": "N",
        "baggageBelt": "4",
    },
}


class TestAeroDataBoxSource:
    """Tests for AeroDataBoxSource."""

    @patch(GET)
    def test_get_flight_request(self, mock_get, json_response) -> None:
        """Lookup URL carries the number without spaces and the date."""
        mock_get.return_value = json_response([RECORD])
        src = AeroDataBoxSource(api_key="rk", base_url="https://example.test")
        src.get_flight("DL 200", date(2025, 6, 2))

        args, kwargs = mock_get.call_args
        assert args[0] == "https://example.test/flights/number/DL200/2025-06-02"
        assert kwargs["headers"]["X-RapidAPI-Key"] == "rk"
        assert kwargs["headers"]["X-RapidAPI-Host"] == "aerodatabox.p.rapidapi.com"

    @patch(GET)
    def test_conversion(self, mock_get, json_response) -> None:
        """Short-form and ISO UTC times both parse; delay is computed."""
        mock_get.return_value = json_response([RECORD])
        f = AeroDataBoxSource(api_key="rk").get_flight("DL200", date(2025, 6, 2))

        assert f is not None
        assert f.flight_number == "DL200"
        assert f.airline == "Delta Air Lines"
        assert f.status == FlightStatus.DELAYED
        assert f.scheduled_departure == datetime(2025, 6, 2, 15, 0, tzinfo=timezone.utc)
        assert f.scheduled_arrival == datetime(2025, 6, 2, 18, 0, tzinfo=timezone.utc)
        assert f.actual_departure == datetime(2025, 6, 2, 16, 30, tzinfo=timezone.utc)
        assert f.delay == 90
        assert f.origin.city == "Chicago"
        assert f.origin.timezone == "America/Chicago"
        assert f.origin.latitude == pytest.approx(41.9786)
        assert f.destination.city == "Miami"
        assert f.baggage_claim == "4"
        assert f.aircraft == "Boeing 737-800"

    @pytest.mark.parametrize(
        "path",
        [
            ("number",),
            ("airline", "name"),
            ("departure", "airport", "iata"),
            ("arrival", "airport", "iata"),
            ("departure", "scheduledTime"),
            ("arrival", "scheduledTime"),
        ],
    )
    def test_missing_identity_field_drops_record(self, path) -> None:
        """Removing any one identity field yields no flight."""
        record = copy.deepcopy(RECORD)
        node = record
        for key in path[:-1]:
            node = node[key]
        del node[path[-1]]
        assert AeroDataBoxSource(api_key="rk").record_to_flight(record) is None

    @patch(GET)
    def test_search_by_flight_number(self, mock_get, json_response) -> None:
        mock_get.return_value = json_response([RECORD, {"number": "DL200"}])
        flights = AeroDataBoxSource(api_key="rk").search_flights("dal200")
        assert len(flights) == 1
        assert "/flights/number/DL200/" in mock_get.call_args[0][0]
        assert flights[0].flight_number == "DL200"

    def test_text_search_rejected(self) -> None:
        with pytest.raises(InvalidRequest):
            AeroDataBoxSource(api_key="rk").search_flights("Delta")

    def test_empty_flight_number_rejected(self) -> None:
        with pytest.raises(InvalidRequest):
            AeroDataBoxSource(api_key="rk").get_flight("  ")

    def test_missing_key(self) -> None:
        src = AeroDataBoxSource(api_key="")
        assert not src.has_credential()
        with pytest.raises(MissingCredential, match="RAPIDAPI_KEY"):
            src.get_flight("DL200")

    @patch(GET)
    def test_no_content(self, mock_get, json_response) -> None:
        """HTTP 204 means no flights."""
        mock_get.return_value = json_response(None, status_code=204)
        assert AeroDataBoxSource(api_key="rk").get_flight("DL200") is None

    @patch(GET)
    def test_object_body_is_malformed(self, mock_get, json_response) -> None:
        mock_get.return_value = json_response({"message": "not a list"})
        with pytest.raises(MalformedResponse):
            AeroDataBoxSource(api_key="rk").get_flight("DL200")
