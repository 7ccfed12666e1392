"""Glasses cloud client for camera, display and audio commands."""

import base64
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx

from price_lens.domain.photos import PhotoData
from price_lens.services.sessions import GlassesClient, GlassesSession


@dataclass
class HttpxGlassesClient(GlassesClient):
    """HTTPX-backed client for the glasses cloud session API."""

    api_key: str
    package_name: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_key: str, package_name: str, base_url: str
    ) -> "HttpxGlassesClient":
        """Create a glasses client with a managed httpx session."""
        return cls(
            api_key=api_key,
            package_name=package_name,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    def open_session(self, session_id: str, user_id: str) -> "HttpxGlassesSession":
        """Return a handle bound to one session."""
        return HttpxGlassesSession(session_id=session_id, user_id=user_id, client=self)

    async def request_photo(self, session_id: str) -> PhotoData:
        """Ask the glasses to take a photo and return it."""
        payload = await self._post(session_id, "photo", {}, timeout=30)
        return _parse_photo(payload)

    async def show_text_wall(
        self, session_id: str, text: str, duration_ms: int | None = None
    ) -> None:
        """Show text on the glasses display."""
        body: dict[str, object] = {
            "layout": {"layoutType": "text_wall", "text": text}
        }
        if duration_ms is not None:
            body["durationMs"] = duration_ms
        await self._post(session_id, "display", body, timeout=10)

    async def play_audio(self, session_id: str, audio_url: str) -> bool:
        """Play audio from a URL on the glasses."""
        payload = await self._post(
            session_id, "audio", {"audioUrl": audio_url}, timeout=30
        )
        return bool(payload.get("success"))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _post(
        self,
        session_id: str,
        action: str,
        body: dict[str, object],
        timeout: float,
    ) -> dict[str, object]:
        url = f"{self.base_url}/api/sessions/{session_id}/{action}"
        response = await self.http_client.post(
            url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "X-Package-Name": self.package_name,
            },
            json=body,
            timeout=timeout,
        )
        response.raise_for_status()
        if not response.content:
            return {}
        payload = response.json()
        if not isinstance(payload, dict):
            raise RuntimeError(f"Unexpected glasses response for {action}")
        return payload


@dataclass
class HttpxGlassesSession(GlassesSession):
    """Session handle that forwards commands to the glasses cloud."""

    session_id: str
    user_id: str
    client: HttpxGlassesClient

    async def request_photo(self) -> PhotoData:
        return await self.client.request_photo(self.session_id)

    async def show_text_wall(self, text: str, duration_ms: int | None = None) -> None:
        await self.client.show_text_wall(self.session_id, text, duration_ms)

    async def play_audio(self, audio_url: str) -> bool:
        return await self.client.play_audio(self.session_id, audio_url)


def _parse_photo(payload: dict[str, object]) -> PhotoData:
    """Decode a photo payload from the glasses cloud."""
    request_id = payload.get("requestId")
    encoded = payload.get("data")
    if not isinstance(request_id, str) or not isinstance(encoded, str):
        raise RuntimeError("Glasses photo response is missing requestId or data")
    data = base64.b64decode(encoded)
    size = payload.get("size")
    filename = payload.get("filename")
    return PhotoData(
        request_id=request_id,
        data=data,
        mime_type=str(payload.get("mimeType") or "image/jpeg"),
        timestamp=_parse_timestamp(payload.get("timestamp")),
        filename=filename if isinstance(filename, str) else None,
        size=size if isinstance(size, int) else len(data),
    )


def _parse_timestamp(value: object) -> datetime:
    """Accept epoch milliseconds or ISO-8601; default to now."""
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return datetime.now(tz=UTC)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(tz=UTC)
