"""Flight-data aggregation: canonical model, provider errors, orchestration."""

from flightlink.aggregate.errors import (
    InvalidRequest,
    MalformedResponse,
    MissingCredential,
    ProviderError,
    ProviderUnavailable,
    TransportFailure,
    UpstreamError,
)
from flightlink.aggregate.models import (
    Airport,
    Flight,
    FlightStatus,
    TimeStatus,
    Trip,
    flight_from_dict,
    flight_to_dict,
)

__all__ = [
    "Airport",
    "Flight",
    "FlightStatus",
    "InvalidRequest",
    "MalformedResponse",
    "MissingCredential",
    "ProviderError",
    "ProviderUnavailable",
    "TimeStatus",
    "TransportFailure",
    "Trip",
    "UpstreamError",
    "flight_from_dict",
    "flight_to_dict",
]
