"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    package_name: str
    glasses_api_key: str
    glasses_cloud_url: str = "https://api.mentra.glass"
    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    elevenlabs_api_key: str
    elevenlabs_voice_id: str = "JBFqnCBsd6RMkjVDRZzb"
    elevenlabs_model_id: str = "eleven_multilingual_v2"
    elevenlabs_output_format: str = "mp3_44100_128"
    google_places_api_key: str
    places_search_radius_m: float = 5000.0
    capture_tick_seconds: float = 1.0
    capture_cooldown_seconds: float = 30.0
    speech_max_chars: int = 50
    audio_ttl_seconds: int = 600
    analysis_workers: int = 1
    public_base_url: str = "http://localhost:3000"
    port: int = 3000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
