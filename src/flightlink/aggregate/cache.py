"""Per-adapter airport resolution cache."""

import re
import threading
from typing import Callable, Dict, Optional

from flightlink.aggregate.models import DEFAULT_TIMEZONE, UNKNOWN, Airport

_LEADING_WORDS_RE = re.compile(r"^[A-Za-z\s]+")


def city_from_airport_name(name: Optional[str]) -> str:
    """Best-effort city guess: the leading run of letters and spaces of an airport name."""
    if not name:
        return UNKNOWN
    match = _LEADING_WORDS_RE.match(name)
    if match and match.group(0).strip():
        return match.group(0).strip()
    return name


class AirportCache:
    """Maps an airport code to the Airport first synthesized for it.

    Later hints for an already-seen code are ignored, so every Flight an
    adapter produces shares one Airport value per code.
    """

    def __init__(self, reference: Optional[Callable[[str], Optional[Airport]]] = None):
        self._reference = reference
        self._airports: Dict[str, Airport] = {}
        self._lock = threading.Lock()

    def resolve(
        self,
        code: str,
        name: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
        timezone: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Airport:
        """Return the cached Airport for code, creating it from the hints on first sighting."""
        code = code.strip().upper()
        with self._lock:
            cached = self._airports.get(code)
            if cached is not None:
                return cached

            airport = self._reference(code) if self._reference else None
            if airport is None:
                airport = Airport(
                    code=code,
                    name=name or code,
                    city=city or city_from_airport_name(name),
                    country=country or UNKNOWN,
                    timezone=timezone or DEFAULT_TIMEZONE,
                    latitude=float(latitude) if latitude is not None else 0.0,
                    longitude=float(longitude) if longitude is not None else 0.0,
                )
            self._airports[code] = airport
            return airport

    def get(self, code: str) -> Optional[Airport]:
        return self._airports.get(code.strip().upper())

    def __contains__(self, code: str) -> bool:
        return code.strip().upper() in self._airports

    def __len__(self) -> int:
        return len(self._airports)
