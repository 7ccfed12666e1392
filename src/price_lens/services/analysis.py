"""Product analysis of captured photos using a vision model."""

import asyncio
import base64
import contextlib
import logging
from dataclasses import dataclass, field
from typing import Protocol

from price_lens.domain.photos import CapturedPhoto

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """You will be provided an image of a product.

1. Give me 3 alternatives to this product and their prices in JSON format with:
Product Name
Product Store
Product Price

Only include products with all fields populated.

2. Provide a one sentence recommendation about whether to buy the product: \
e.g. if this is a good price and i should buy it, or buy elsewhere or buy an \
alternative product.

Analyze this product image and provide alternatives with current pricing."""


class AnalysisClient(Protocol):
    """Interface for vision model calls."""

    async def analyze(self, *, model: str, prompt: str, image_data_url: str) -> str:
        """Return the model's text answer for an image and prompt."""


@dataclass
class AnalysisService:
    """Prepares the product prompt and calls the vision client."""

    client: AnalysisClient
    model: str
    prompt: str = ANALYSIS_PROMPT

    async def analyze(self, photo: CapturedPhoto) -> str:
        """Return the product comparison text for a photo."""
        data_url = _to_data_url(photo.data, photo.mime_type)
        return await self.client.analyze(
            model=self.model,
            prompt=self.prompt,
            image_data_url=data_url,
        )


@dataclass
class AnalysisQueue:
    """Background consumer that writes each photo's analysis exactly once."""

    analysis_service: AnalysisService
    workers: int = 1
    _queue: asyncio.Queue[CapturedPhoto] = field(
        default_factory=asyncio.Queue, init=False
    )
    _tasks: list[asyncio.Task[None]] = field(default_factory=list, init=False)

    def submit(self, photo: CapturedPhoto) -> None:
        """Enqueue a photo for analysis without waiting for the result."""
        self._queue.put_nowait(photo)
        logger.info(
            "Queued photo for analysis",
            extra={"user_id": photo.user_id, "request_id": photo.request_id},
        )

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        """Start the consumer tasks on the running event loop."""
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._run(), name=f"analysis-worker-{index}")
            for index in range(max(1, self.workers))
        ]

    async def stop(self) -> None:
        """Cancel the consumer tasks."""
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks = []

    async def join(self) -> None:
        """Wait until every queued photo has been processed."""
        await self._queue.join()

    async def process(self, photo: CapturedPhoto) -> None:
        """Analyze one photo and record the result or the error text."""
        logger.info(
            "Starting analysis",
            extra={"user_id": photo.user_id, "request_id": photo.request_id},
        )
        try:
            result = await self.analysis_service.analyze(photo)
        except Exception as exc:
            logger.exception(
                "Photo analysis failed",
                extra={"user_id": photo.user_id, "request_id": photo.request_id},
            )
            result = f"Error analyzing photo: {exc}"
        photo.record_analysis(result)
        logger.info(
            "Analysis stored",
            extra={"user_id": photo.user_id, "request_id": photo.request_id},
        )

    async def _run(self) -> None:
        while True:
            photo = await self._queue.get()
            try:
                await self.process(photo)
            except Exception:
                logger.exception(
                    "Analysis worker failed to record result",
                    extra={"request_id": photo.request_id},
                )
            finally:
                self._queue.task_done()


def _to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type or _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
