"""Domain models for store lookups."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoreLocation:
    """A store candidate near the user."""

    name: str
    address: str | None
    latitude: float
    longitude: float
    distance_m: float
