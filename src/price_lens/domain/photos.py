"""Domain models for captured photos."""

from dataclasses import dataclass
from datetime import datetime


class AnalysisAlreadyRecordedError(RuntimeError):
    """Raised when a photo analysis is written a second time."""


@dataclass(frozen=True)
class PhotoData:
    """Photo payload returned by the glasses camera."""

    request_id: str
    data: bytes
    mime_type: str
    timestamp: datetime
    filename: str | None = None
    size: int | None = None


@dataclass
class CapturedPhoto:
    """A photo cached for a user, with its analysis once available."""

    request_id: str
    user_id: str
    data: bytes
    mime_type: str
    timestamp: datetime
    filename: str | None
    size: int
    analysis: str | None = None

    @classmethod
    def from_capture(cls, photo: PhotoData, user_id: str) -> "CapturedPhoto":
        """Build a cached photo from a camera payload."""
        return cls(
            request_id=photo.request_id,
            user_id=user_id,
            data=photo.data,
            mime_type=photo.mime_type,
            timestamp=photo.timestamp,
            filename=photo.filename,
            size=photo.size if photo.size is not None else len(photo.data),
        )

    @property
    def has_analysis(self) -> bool:
        return self.analysis is not None

    def record_analysis(self, text: str) -> None:
        """Store the analysis text; a photo is analyzed at most once."""
        if self.analysis is not None:
            raise AnalysisAlreadyRecordedError(
                f"Analysis already recorded for photo {self.request_id}"
            )
        self.analysis = text
