"""Flight-data aggregation across unreliable external providers."""

__version__ = "0.1.0"
