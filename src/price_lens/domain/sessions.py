"""Domain models for glasses capture sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from price_lens.services.sessions import GlassesSession

LONG_PRESS = "long"


@dataclass
class UserCaptureState:
    """Capture state for a user with an active glasses session."""

    user_id: str
    session: GlassesSession | None
    next_allowed_capture_at: datetime | None
    is_streaming: bool = False
