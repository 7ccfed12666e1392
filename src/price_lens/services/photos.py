"""Photo storage interface."""

from datetime import datetime
from typing import Protocol

from price_lens.domain.photos import CapturedPhoto


class PhotoRepository(Protocol):
    """Storage for photos captured per user."""

    def add_photo(self, photo: CapturedPhoto) -> None:
        """Append a photo to the owner's history."""

    def list_photos(self, user_id: str) -> list[CapturedPhoto]:
        """Return all photos for a user in capture order."""

    def get_photo(self, user_id: str, request_id: str) -> CapturedPhoto | None:
        """Return a photo by request id, if present."""

    def get_latest(self, user_id: str) -> CapturedPhoto | None:
        """Return the most recently stored photo, if any."""

    def latest_timestamp(self, user_id: str) -> datetime | None:
        """Return the capture time of the most recent photo, if any."""
