"""In-memory photo storage."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime

from price_lens.domain.photos import CapturedPhoto
from price_lens.services.photos import PhotoRepository


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """Keeps each user's photos in process memory, append-only."""

    _photos: defaultdict[str, list[CapturedPhoto]] = field(
        default_factory=lambda: defaultdict(list)
    )
    _latest_timestamps: dict[str, datetime] = field(default_factory=dict)

    def add_photo(self, photo: CapturedPhoto) -> None:
        """Append a photo and remember its timestamp as the latest."""
        self._photos[photo.user_id].append(photo)
        self._latest_timestamps[photo.user_id] = photo.timestamp

    def list_photos(self, user_id: str) -> list[CapturedPhoto]:
        return list(self._photos.get(user_id, []))

    def get_photo(self, user_id: str, request_id: str) -> CapturedPhoto | None:
        for photo in self._photos.get(user_id, []):
            if photo.request_id == request_id:
                return photo
        return None

    def get_latest(self, user_id: str) -> CapturedPhoto | None:
        photos = self._photos.get(user_id)
        return photos[-1] if photos else None

    def latest_timestamp(self, user_id: str) -> datetime | None:
        return self._latest_timestamps.get(user_id)
