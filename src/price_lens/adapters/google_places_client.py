"""Google Places API (New) client."""

from dataclasses import dataclass

import httpx

from price_lens.services.places import PlacesClient

_FIELD_MASK = "places.displayName,places.formattedAddress,places.location"
_MAX_RADIUS_M = 50_000.0


@dataclass
class HttpxGooglePlacesClient(PlacesClient):
    """HTTPX-backed Google Places client."""

    api_key: str
    http_client: httpx.AsyncClient
    base_url: str = "https://places.googleapis.com/v1"

    @classmethod
    def create(cls, api_key: str) -> "HttpxGooglePlacesClient":
        """Create a Places client with a managed httpx session."""
        return cls(api_key=api_key, http_client=httpx.AsyncClient())

    async def search_text(
        self, query: str, latitude: float, longitude: float, radius_m: float
    ) -> dict[str, object]:
        """Search places matching the query, biased to a circle around a point."""
        response = await self.http_client.post(
            f"{self.base_url}/places:searchText",
            headers={
                "X-Goog-Api-Key": self.api_key,
                "X-Goog-FieldMask": _FIELD_MASK,
            },
            json={
                "textQuery": query,
                "locationBias": {
                    "circle": {
                        "center": {"latitude": latitude, "longitude": longitude},
                        "radius": min(radius_m, _MAX_RADIUS_M),
                    }
                },
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
