"""Persistence of user-authored flights."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Protocol, Sequence, Union, runtime_checkable

from flightlink.aggregate.models import Flight, flight_from_dict, flight_to_dict

_LOG = logging.getLogger(__name__)


@runtime_checkable
class UserFlightStore(Protocol):
    """Keyed read/write interface the service persists user flights through."""

    def load_user_flights(self) -> List[Flight]:
        ...

    def save_user_flights(self, flights: Sequence[Flight]) -> None:
        ...


class InMemoryFlightStore:
    """Store that keeps flights in process memory."""

    def __init__(self, flights: Sequence[Flight] = ()):
        self._flights = list(flights)

    def load_user_flights(self) -> List[Flight]:
        return list(self._flights)

    def save_user_flights(self, flights: Sequence[Flight]) -> None:
        self._flights = list(flights)


class JsonFileFlightStore:
    """Store that writes flights as a JSON array to a single file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load_user_flights(self) -> List[Flight]:
        """Read flights back. A missing or unreadable file yields no flights."""
        if not self.path.exists():
            return []
        try:
            with self.path.open(encoding="utf-8") as f:
                rows = json.load(f)
            if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
                raise ValueError("expected a JSON array of flight objects")
            return [flight_from_dict(row) for row in rows]
        except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            _LOG.warning("Could not read user flights from %s: %s", self.path, e)
            return []

    def save_user_flights(self, flights: Sequence[Flight]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rows = [flight_to_dict(f) for f in flights]
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".user_flights.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(rows, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
