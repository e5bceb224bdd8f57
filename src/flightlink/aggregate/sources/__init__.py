"""Pluggable flight data providers."""

from flightlink.aggregate.sources.aerodatabox import AeroDataBoxSource
from flightlink.aggregate.sources.aviationstack import AviationStackSource
from flightlink.aggregate.sources.base import FlightProvider
from flightlink.aggregate.sources.free_flight import FreeFlightSource
from flightlink.aggregate.sources.opensky import OpenSkySource

__all__ = [
    "AeroDataBoxSource",
    "AviationStackSource",
    "FlightProvider",
    "FreeFlightSource",
    "OpenSkySource",
]
