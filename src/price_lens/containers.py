"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from price_lens.adapters.elevenlabs_client import HttpxElevenLabsClient
from price_lens.adapters.glasses_client import HttpxGlassesClient
from price_lens.adapters.google_places_client import HttpxGooglePlacesClient
from price_lens.adapters.in_memory_photo_repository import InMemoryPhotoRepository
from price_lens.adapters.openai_analysis_client import OpenAIAnalysisClient
from price_lens.config import Settings
from price_lens.services.analysis import AnalysisQueue, AnalysisService
from price_lens.services.cache import InMemoryCache
from price_lens.services.capture import CaptureService
from price_lens.services.photos import PhotoRepository
from price_lens.services.places import PlacesService
from price_lens.services.sessions import GlassesClient, SessionRegistry
from price_lens.services.speech import SpeechService
from price_lens.services.ticker import CaptureTicker


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    glasses_client: GlassesClient
    session_registry: SessionRegistry
    photo_repository: PhotoRepository
    analysis_queue: AnalysisQueue
    capture_service: CaptureService
    capture_ticker: CaptureTicker
    speech_service: SpeechService
    places_service: PlacesService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    glasses_client = HttpxGlassesClient.create(
        api_key=resolved_settings.glasses_api_key,
        package_name=resolved_settings.package_name,
        base_url=resolved_settings.glasses_cloud_url,
    )
    openai_client = OpenAIAnalysisClient.create(resolved_settings.openai_api_key)
    speech_client = HttpxElevenLabsClient.create(
        api_key=resolved_settings.elevenlabs_api_key,
        voice_id=resolved_settings.elevenlabs_voice_id,
        model_id=resolved_settings.elevenlabs_model_id,
        output_format=resolved_settings.elevenlabs_output_format,
    )
    places_client = HttpxGooglePlacesClient.create(
        resolved_settings.google_places_api_key
    )

    session_registry = SessionRegistry()
    photo_repository = InMemoryPhotoRepository()
    analysis_queue = AnalysisQueue(
        analysis_service=AnalysisService(
            client=openai_client, model=resolved_settings.openai_model
        ),
        workers=resolved_settings.analysis_workers,
    )
    capture_service = CaptureService(
        registry=session_registry,
        photo_repository=photo_repository,
        dispatcher=analysis_queue,
        cooldown=timedelta(seconds=resolved_settings.capture_cooldown_seconds),
    )
    capture_ticker = CaptureTicker(
        capture_service=capture_service,
        interval_seconds=resolved_settings.capture_tick_seconds,
    )
    speech_service = SpeechService(
        client=speech_client,
        cache=InMemoryCache(),
        public_base_url=resolved_settings.public_base_url,
        max_chars=resolved_settings.speech_max_chars,
        ttl_seconds=resolved_settings.audio_ttl_seconds,
    )
    places_service = PlacesService(
        client=places_client, radius_m=resolved_settings.places_search_radius_m
    )

    async def close_resources() -> None:
        await glasses_client.close()
        await openai_client.close()
        await speech_client.close()
        await places_client.close()

    return AppContainer(
        settings=resolved_settings,
        glasses_client=glasses_client,
        session_registry=session_registry,
        photo_repository=photo_repository,
        analysis_queue=analysis_queue,
        capture_service=capture_service,
        capture_ticker=capture_ticker,
        speech_service=speech_service,
        places_service=places_service,
        close_resources=close_resources,
    )
