"""Nearby store lookup."""

import math
from dataclasses import dataclass
from typing import Protocol

from price_lens.domain.places import StoreLocation

EARTH_RADIUS_M = 6_371_000.0


class PlacesClient(Protocol):
    """Interface for places text search."""

    async def search_text(
        self, query: str, latitude: float, longitude: float, radius_m: float
    ) -> dict[str, object]:
        """Search places by text near a point and return raw API data."""


@dataclass
class PlacesService:
    """Finds the closest locations of a named store."""

    client: PlacesClient
    radius_m: float = 5000.0

    async def nearby_stores(
        self, name: str, latitude: float, longitude: float, limit: int = 5
    ) -> list[StoreLocation]:
        """Return store candidates ranked by distance from the given point."""
        payload = await self.client.search_text(
            name, latitude, longitude, self.radius_m
        )
        stores: list[StoreLocation] = []
        for place in payload.get("places") or []:
            if not isinstance(place, dict):
                continue
            store = _parse_place(place, latitude, longitude)
            if store is not None:
                stores.append(store)
        stores.sort(key=lambda store: store.distance_m)
        return stores[:limit]


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in meters."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def _parse_place(
    place: dict[str, object], latitude: float, longitude: float
) -> StoreLocation | None:
    location = place.get("location")
    if not isinstance(location, dict):
        return None
    lat = location.get("latitude")
    lng = location.get("longitude")
    if not isinstance(lat, int | float) or not isinstance(lng, int | float):
        return None
    display_name = place.get("displayName")
    name = (
        display_name.get("text")
        if isinstance(display_name, dict)
        else display_name
    )
    address = place.get("formattedAddress")
    return StoreLocation(
        name=str(name or "Unknown store"),
        address=str(address) if address else None,
        latitude=float(lat),
        longitude=float(lng),
        distance_m=haversine_m(latitude, longitude, float(lat), float(lng)),
    )
