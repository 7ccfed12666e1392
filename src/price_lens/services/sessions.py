"""Registry of active glasses sessions keyed by user."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from price_lens.domain.photos import PhotoData
from price_lens.domain.sessions import UserCaptureState

logger = logging.getLogger(__name__)


class GlassesSession(Protocol):
    """Handle for one user's connection to the glasses."""

    session_id: str
    user_id: str

    async def request_photo(self) -> PhotoData:
        """Ask the glasses camera for a photo."""

    async def show_text_wall(self, text: str, duration_ms: int | None = None) -> None:
        """Show a block of text on the glasses display."""

    async def play_audio(self, audio_url: str) -> bool:
        """Play audio from a URL on the glasses; return whether it played."""


class GlassesClient(Protocol):
    """Factory for session handles on the glasses cloud."""

    def open_session(self, session_id: str, user_id: str) -> GlassesSession:
        """Return a handle for an accepted session."""


@dataclass
class SessionRegistry:
    """Owns the capture state of every user with an active session."""

    _states: dict[str, UserCaptureState] = field(default_factory=dict)

    def start(
        self, user_id: str, session: GlassesSession, now: datetime
    ) -> UserCaptureState:
        """Create fresh capture state, replacing any previous state for the user."""
        if user_id in self._states:
            logger.info(
                "Replacing capture state for re-entered session",
                extra={"user_id": user_id},
            )
        state = UserCaptureState(
            user_id=user_id,
            session=session,
            next_allowed_capture_at=now,
        )
        self._states[user_id] = state
        return state

    def get(self, user_id: str) -> UserCaptureState | None:
        """Return the capture state for a user, if the session is active."""
        return self._states.get(user_id)

    def end(self, user_id: str) -> UserCaptureState | None:
        """Discard the capture state for a user and disarm it."""
        state = self._states.pop(user_id, None)
        if state is None:
            return None
        state.is_streaming = False
        state.next_allowed_capture_at = None
        state.session = None
        return state

    def active_user_ids(self) -> list[str]:
        return list(self._states)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._states
