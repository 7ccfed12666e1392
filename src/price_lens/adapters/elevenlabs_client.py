"""ElevenLabs text-to-speech client."""

from dataclasses import dataclass

import httpx

from price_lens.services.speech import SpeechClient


@dataclass
class HttpxElevenLabsClient(SpeechClient):
    """HTTPX-backed ElevenLabs client."""

    api_key: str
    voice_id: str
    model_id: str
    output_format: str
    http_client: httpx.AsyncClient
    base_url: str = "https://api.elevenlabs.io/v1"

    @classmethod
    def create(
        cls, api_key: str, voice_id: str, model_id: str, output_format: str
    ) -> "HttpxElevenLabsClient":
        """Create an ElevenLabs client with a managed httpx session."""
        return cls(
            api_key=api_key,
            voice_id=voice_id,
            model_id=model_id,
            output_format=output_format,
            http_client=httpx.AsyncClient(),
        )

    async def synthesize(self, text: str) -> bytes:
        """Convert text to speech and return the encoded audio."""
        url = f"{self.base_url}/text-to-speech/{self.voice_id}"
        response = await self.http_client.post(
            url,
            params={"output_format": self.output_format},
            headers={"xi-api-key": self.api_key},
            json={"text": text, "model_id": self.model_id},
            timeout=30,
        )
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
