"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from price_lens.adapters.in_memory_photo_repository import InMemoryPhotoRepository
from price_lens.config import Settings
from price_lens.containers import AppContainer
from price_lens.domain.photos import CapturedPhoto, PhotoData
from price_lens.services.analysis import AnalysisClient, AnalysisQueue, AnalysisService
from price_lens.services.cache import InMemoryCache
from price_lens.services.capture import CaptureService
from price_lens.services.places import PlacesClient, PlacesService
from price_lens.services.sessions import SessionRegistry
from price_lens.services.speech import SpeechClient, SpeechService
from price_lens.services.ticker import CaptureTicker

START = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


def make_photo(request_id: str = "req-1", data: bytes = JPEG_BYTES) -> PhotoData:
    return PhotoData(
        request_id=request_id,
        data=data,
        mime_type="image/jpeg",
        timestamp=START,
        filename=f"{request_id}.jpg",
    )


def make_captured(
    request_id: str = "req-1",
    user_id: str = "user-1",
    analysis: str | None = None,
) -> CapturedPhoto:
    photo = CapturedPhoto.from_capture(make_photo(request_id), user_id)
    photo.analysis = analysis
    return photo


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = START

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class FakeGlassesSession:
    """Glasses session that records commands and returns scripted photos."""

    session_id: str = "session-1"
    user_id: str = "user-1"
    results: list[PhotoData | Exception] = field(default_factory=list)
    clock: FakeClock | None = None
    capture_seconds: float = 0.0
    photo_requests: int = 0
    texts: list[tuple[str, int | None]] = field(default_factory=list)
    audio_urls: list[str] = field(default_factory=list)
    play_result: bool = True

    async def request_photo(self) -> PhotoData:
        self.photo_requests += 1
        if self.clock is not None:
            self.clock.advance(self.capture_seconds)
        if self.results:
            result = self.results.pop(0)
        else:
            result = make_photo(f"req-{self.photo_requests}")
        if isinstance(result, Exception):
            raise result
        return result

    async def show_text_wall(self, text: str, duration_ms: int | None = None) -> None:
        self.texts.append((text, duration_ms))

    async def play_audio(self, audio_url: str) -> bool:
        self.audio_urls.append(audio_url)
        return self.play_result


@dataclass
class FakeGlassesClient:
    """Glasses client handing out fake sessions."""

    sessions: dict[str, FakeGlassesSession] = field(default_factory=dict)

    def open_session(self, session_id: str, user_id: str) -> FakeGlassesSession:
        session = FakeGlassesSession(session_id=session_id, user_id=user_id)
        self.sessions[user_id] = session
        return session


@dataclass
class RecordingDispatcher:
    """Analysis dispatcher that only records submissions."""

    submitted: list[CapturedPhoto] = field(default_factory=list)

    def submit(self, photo: CapturedPhoto) -> None:
        self.submitted.append(photo)


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Analysis client returning fixed text or raising."""

    text: str = "Alternatives: Store A $10. Recommendation: buy it here."
    error: Exception | None = None
    calls: list[dict[str, str]] = field(default_factory=list)

    async def analyze(self, *, model: str, prompt: str, image_data_url: str) -> str:
        self.calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeSpeechClient(SpeechClient):
    """Speech client returning static audio bytes."""

    audio: bytes = b"ID3fake-mp3"
    error: Exception | None = None
    texts: list[str] = field(default_factory=list)

    async def synthesize(self, text: str) -> bytes:
        self.texts.append(text)
        if self.error is not None:
            raise self.error
        return self.audio


@dataclass
class FakePlacesClient(PlacesClient):
    """Places client with an in-memory response."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "places": [
                {
                    "displayName": {"text": "Best Buy Far"},
                    "formattedAddress": "2 Far Rd",
                    "location": {"latitude": 37.80, "longitude": -122.40},
                },
                {
                    "displayName": {"text": "Best Buy Near"},
                    "formattedAddress": "1 Near St",
                    "location": {"latitude": 37.7750, "longitude": -122.4195},
                },
            ]
        }
    )
    error: Exception | None = None
    queries: list[tuple[str, float, float, float]] = field(default_factory=list)

    async def search_text(
        self, query: str, latitude: float, longitude: float, radius_m: float
    ) -> dict[str, object]:
        self.queries.append((query, latitude, longitude, radius_m))
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        package_name="com.example.pricelens",
        glasses_api_key="glasses-key",
        openai_api_key="openai-key",
        elevenlabs_api_key="elevenlabs-key",
        google_places_api_key="places-key",
        public_base_url="https://lens.test",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def capture_service(
    registry: SessionRegistry,
    photo_repository: InMemoryPhotoRepository,
    dispatcher: RecordingDispatcher,
    clock: FakeClock,
) -> CaptureService:
    return CaptureService(
        registry=registry,
        photo_repository=photo_repository,
        dispatcher=dispatcher,
        cooldown=timedelta(seconds=30),
        clock=clock,
    )


@pytest.fixture
def glasses_client() -> FakeGlassesClient:
    return FakeGlassesClient()


@pytest.fixture
def speech_client() -> FakeSpeechClient:
    return FakeSpeechClient()


@pytest.fixture
def places_client() -> FakePlacesClient:
    return FakePlacesClient()


@pytest.fixture
def container(
    settings: Settings,
    glasses_client: FakeGlassesClient,
    speech_client: FakeSpeechClient,
    places_client: FakePlacesClient,
) -> AppContainer:
    registry = SessionRegistry()
    photo_repository = InMemoryPhotoRepository()
    analysis_queue = AnalysisQueue(
        analysis_service=AnalysisService(
            client=FakeAnalysisClient(), model=settings.openai_model
        )
    )
    capture_service = CaptureService(
        registry=registry,
        photo_repository=photo_repository,
        dispatcher=analysis_queue,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        glasses_client=glasses_client,
        session_registry=registry,
        photo_repository=photo_repository,
        analysis_queue=analysis_queue,
        capture_service=capture_service,
        capture_ticker=CaptureTicker(
            capture_service=capture_service, interval_seconds=3600
        ),
        speech_service=SpeechService(
            client=speech_client,
            cache=InMemoryCache(),
            public_base_url=settings.public_base_url,
            max_chars=settings.speech_max_chars,
        ),
        places_service=PlacesService(client=places_client),
        close_resources=close_resources,
    )
