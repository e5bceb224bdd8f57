"""Provider protocol and helpers shared by every adapter."""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import requests

from flightlink.aggregate.errors import MalformedResponse, TransportFailure, UpstreamError
from flightlink.aggregate.models import Flight, minutes_between

_LOG = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

# Fractional-second form first, then whole seconds.
ISO_TIMESTAMP_FORMATS: Tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)


@runtime_checkable
class FlightProvider(Protocol):
    """Protocol for pluggable flight data providers."""

    name: str

    def search_flights(self, query: str) -> List[Flight]:
        """Search flights for a free-text query. Raises ProviderError subclasses."""
        ...

    def get_flight(
        self, flight_number: str, flight_date: Optional[date] = None
    ) -> Optional[Flight]:
        """Look up a single flight, None when the provider has no match."""
        ...

    def has_credential(self) -> bool:
        """True when the provider is configured well enough to be called."""
        ...


def fetch_json(
    url: str,
    provider: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    auth: Optional[Tuple[str, str]] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> Any:
    """GET url and decode its JSON body, translating failures into ProviderError subclasses.

    Returns None for 204 No Content.
    """
    try:
        resp = requests.get(url, params=params, headers=headers, auth=auth, timeout=timeout)
    except requests.RequestException as e:
        raise TransportFailure(e, provider=provider) from e

    if resp.status_code == 204:
        return None
    if not 200 <= resp.status_code < 300:
        raise UpstreamError(resp.status_code, f"HTTP {resp.status_code}", provider=provider)

    try:
        return resp.json()
    except ValueError as e:
        raise MalformedResponse(e, provider=provider) from e


def parse_timestamp(
    value: Any, formats: Sequence[str] = ISO_TIMESTAMP_FORMATS
) -> Optional[datetime]:
    """Parse a timestamp with the first matching format. None when absent or unparseable."""
    if not value or not isinstance(value, str):
        return None
    s = value.strip()
    for fmt in formats:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def resolve_delay(
    reported: Any, scheduled: datetime, actual: Optional[datetime]
) -> Optional[int]:
    """Reported delay minutes when present, else floor((actual - scheduled) / 60s)."""
    if reported is not None and not isinstance(reported, bool):
        try:
            return int(reported)
        except (TypeError, ValueError):
            pass
    if actual is not None:
        return minutes_between(scheduled, actual)
    return None


def get_str(d: Any, *keys: str) -> Optional[str]:
    """First non-blank string value among keys, stripped."""
    if not isinstance(d, dict):
        return None
    for k in keys:
        v = d.get(k)
        if v is not None and not isinstance(v, (dict, list)) and str(v).strip():
            return str(v).strip()
    return None


def get_dict(d: Any, *path: str) -> Dict[str, Any]:
    """Walk nested objects, returning {} when any step is missing or not an object."""
    node = d
    for key in path:
        if not isinstance(node, dict):
            return {}
        node = node.get(key)
    return node if isinstance(node, dict) else {}


def get_float(d: Any, key: str) -> Optional[float]:
    if not isinstance(d, dict):
        return None
    v = d.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    return float(v)


def log_dropped(provider: str, count: int, total: int) -> None:
    if count:
        _LOG.debug("%s: dropped %d of %d records with missing or unparseable fields", provider, count, total)
