"""Capture state machine driven by button presses and timer ticks."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from price_lens.domain.photos import CapturedPhoto, PhotoData
from price_lens.domain.sessions import LONG_PRESS, UserCaptureState
from price_lens.services.photos import PhotoRepository
from price_lens.services.sessions import GlassesSession, SessionRegistry

logger = logging.getLogger(__name__)

SHORT_PRESS_NOTICE = "Button pressed, about to take photo"
SHORT_PRESS_NOTICE_MS = 4000


class AnalysisDispatcher(Protocol):
    """Accepts captured photos for background analysis."""

    def submit(self, photo: CapturedPhoto) -> None:
        """Enqueue a photo without waiting for its analysis."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class CaptureService:
    """Turns session, button and tick events into photo captures.

    Tick captures push ``next_allowed_capture_at`` forward by ``cooldown``
    before calling the camera, then pull it back to the completion time on
    success. A failed or stalled capture therefore holds the back-off and
    ticks arriving meanwhile stay no-ops.
    """

    registry: SessionRegistry
    photo_repository: PhotoRepository
    dispatcher: AnalysisDispatcher
    cooldown: timedelta = timedelta(seconds=30)
    clock: Callable[[], datetime] = _utcnow
    _notices: set[asyncio.Task[None]] = field(default_factory=set, init=False)

    def on_session_start(
        self, user_id: str, session: GlassesSession
    ) -> UserCaptureState:
        """Create fresh capture state for a user."""
        state = self.registry.start(user_id, session, self.clock())
        logger.info(
            "Session started",
            extra={"user_id": user_id, "session_id": session.session_id},
        )
        return state

    def on_session_stop(self, user_id: str, reason: str | None = None) -> None:
        """Disarm and discard a user's capture state; photos are kept."""
        state = self.registry.end(user_id)
        if state is None:
            logger.info("Stop for unknown session", extra={"user_id": user_id})
            return
        logger.info(
            "Session stopped", extra={"user_id": user_id, "reason": reason}
        )

    async def on_button_press(
        self, user_id: str, press_kind: str, button_id: str | None = None
    ) -> CapturedPhoto | None:
        """Toggle streaming on a long press, capture once on any other press."""
        state = self.registry.get(user_id)
        if state is None or state.session is None:
            logger.warning(
                "Button press without an active session",
                extra={"user_id": user_id, "button_id": button_id},
            )
            return None

        if press_kind == LONG_PRESS:
            state.is_streaming = not state.is_streaming
            logger.info(
                "Streaming toggled",
                extra={"user_id": user_id, "is_streaming": state.is_streaming},
            )
            return None

        session = state.session
        self._show_notice(session, user_id)
        try:
            photo = await session.request_photo()
        except Exception:
            logger.exception("Error taking photo", extra={"user_id": user_id})
            return None
        return self._store(photo, user_id)

    async def on_tick(self, user_id: str) -> CapturedPhoto | None:
        """Capture a photo if the user is streaming and the cooldown has passed."""
        state = self.registry.get(user_id)
        if state is None or state.session is None or not state.is_streaming:
            return None
        now = self.clock()
        next_allowed = state.next_allowed_capture_at
        if next_allowed is None or now <= next_allowed:
            return None

        state.next_allowed_capture_at = now + self.cooldown
        logger.info(
            "Auto-capturing photo",
            extra={
                "user_id": user_id,
                "next_allowed_capture_at": state.next_allowed_capture_at.isoformat(),
            },
        )
        try:
            photo = await state.session.request_photo()
        except Exception:
            logger.exception("Error auto-taking photo", extra={"user_id": user_id})
            return None

        state.next_allowed_capture_at = self.clock()
        return self._store(photo, user_id)

    def _store(self, photo: PhotoData, user_id: str) -> CapturedPhoto:
        captured = CapturedPhoto.from_capture(photo, user_id)
        self.photo_repository.add_photo(captured)
        logger.info(
            "Photo cached",
            extra={
                "user_id": user_id,
                "request_id": captured.request_id,
                "size": captured.size,
            },
        )
        self.dispatcher.submit(captured)
        return captured

    async def close(self) -> None:
        """Cancel capture notices still waiting on the display."""
        notices = list(self._notices)
        for task in notices:
            task.cancel()
        for task in notices:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _show_notice(self, session: GlassesSession, user_id: str) -> None:
        task = asyncio.create_task(
            session.show_text_wall(
                SHORT_PRESS_NOTICE, duration_ms=SHORT_PRESS_NOTICE_MS
            ),
            name=f"capture-notice:{user_id}",
        )
        self._notices.add(task)

        def _done(finished: asyncio.Task[None]) -> None:
            self._notices.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                logger.error(
                    "Failed to show capture notice",
                    extra={"user_id": user_id},
                    exc_info=exc,
                )

        task.add_done_callback(_done)
