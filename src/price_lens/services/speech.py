"""Text-to-speech for analysis results."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from price_lens.services.cache import Cache
from price_lens.services.sessions import GlassesSession

logger = logging.getLogger(__name__)


class SpeechClient(Protocol):
    """Interface for text-to-speech synthesis."""

    async def synthesize(self, text: str) -> bytes:
        """Return encoded audio for the text."""


@dataclass(frozen=True)
class SpeechClip:
    """Synthesized audio kept for the glasses to fetch."""

    audio_id: str
    text: str
    data: bytes
    mime_type: str = "audio/mpeg"


@dataclass(frozen=True)
class SpeechResult:
    """Outcome of speaking text on the glasses."""

    clip: SpeechClip
    audio_url: str
    played: bool


@dataclass
class SpeechService:
    """Synthesizes a short spoken summary and plays it on the glasses."""

    client: SpeechClient
    cache: Cache
    public_base_url: str
    max_chars: int = 50
    ttl_seconds: int = 600

    async def synthesize(self, text: str) -> SpeechClip:
        """Synthesize the first ``max_chars`` characters of the text."""
        snippet = text[: self.max_chars]
        audio = await self.client.synthesize(snippet)
        clip = SpeechClip(audio_id=uuid4().hex, text=snippet, data=audio)
        self.cache.set(_cache_key(clip.audio_id), clip, self.ttl_seconds)
        logger.info(
            "Speech synthesized",
            extra={"audio_id": clip.audio_id, "size": len(audio)},
        )
        return clip

    def get_clip(self, audio_id: str) -> SpeechClip | None:
        """Return a stored clip if it hasn't expired."""
        clip = self.cache.get(_cache_key(audio_id))
        return clip if isinstance(clip, SpeechClip) else None

    def audio_url(self, audio_id: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/api/audio/{audio_id}"

    async def speak(self, text: str, session: GlassesSession | None) -> SpeechResult:
        """Synthesize text and ask the session, if any, to play it.

        Synthesis errors propagate; playback errors only mark the result as
        not played.
        """
        clip = await self.synthesize(text)
        url = self.audio_url(clip.audio_id)
        played = False
        if session is None:
            logger.info("No active session to play speech", extra={"url": url})
        else:
            try:
                played = await session.play_audio(url)
            except Exception:
                logger.exception(
                    "Failed to play speech on glasses",
                    extra={"user_id": session.user_id},
                )
        return SpeechResult(clip=clip, audio_url=url, played=played)


def _cache_key(audio_id: str) -> str:
    return f"audio:{audio_id}"
