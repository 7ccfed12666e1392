"""Per-user periodic tick loop for streaming captures."""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field

from price_lens.services.capture import CaptureService

logger = logging.getLogger(__name__)


@dataclass
class CaptureTicker:
    """Runs ``CaptureService.on_tick`` every interval for each active user.

    Each tick runs as its own task so ticks keep arriving while a capture is
    in flight. Stopping one user's loop leaves its in-flight ticks running;
    ``close`` cancels those too.
    """

    capture_service: CaptureService
    interval_seconds: float = 1.0
    _loops: dict[str, asyncio.Task[None]] = field(default_factory=dict, init=False)
    _ticks: set[asyncio.Task[object]] = field(default_factory=set, init=False)

    def start(self, user_id: str) -> None:
        """Start (or restart) the tick loop for a user."""
        self.stop(user_id)
        self._loops[user_id] = asyncio.create_task(
            self._run(user_id), name=f"capture-ticker:{user_id}"
        )

    def stop(self, user_id: str) -> None:
        """Stop future ticks for a user."""
        task = self._loops.pop(user_id, None)
        if task is not None:
            task.cancel()

    def is_running(self, user_id: str) -> bool:
        task = self._loops.get(user_id)
        return task is not None and not task.done()

    async def close(self) -> None:
        """Cancel every tick loop and the ticks still in flight."""
        tasks = [*self._loops.values(), *self._ticks]
        self._loops.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self, user_id: str) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            tick = asyncio.create_task(self.capture_service.on_tick(user_id))
            self._ticks.add(tick)
            tick.add_done_callback(self._ticks.discard)
