"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, Depends, FastAPI, Request

from price_lens.api.auth import require_glasses_cloud
from price_lens.api.glasses_models import GlassesWebhookEvent
from price_lens.api.photos import router as photos_router
from price_lens.api.webview import router as webview_router
from price_lens.app_logging import configure_logging
from price_lens.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        state_container.analysis_queue.start()
        logger.info(
            "App started",
            extra={"package_name": state_container.settings.package_name},
        )
        yield
        await state_container.capture_ticker.close()
        await state_container.capture_service.close()
        await state_container.analysis_queue.stop()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(photos_router)
    app.include_router(webview_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/webhook", dependencies=[Depends(require_glasses_cloud)])
    async def glasses_webhook(
        event: GlassesWebhookEvent,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> dict[str, str]:
        """Handle session lifecycle and button events from the glasses cloud."""
        state_container: AppContainer = request.app.state.container
        capture_service = state_container.capture_service
        ticker = state_container.capture_ticker

        if event.type == "session_request":
            session = state_container.glasses_client.open_session(
                event.session_id, event.user_id
            )
            capture_service.on_session_start(event.user_id, session)
            ticker.start(event.user_id)
        elif event.type == "stop_request":
            ticker.stop(event.user_id)
            capture_service.on_session_stop(event.user_id, event.reason)
        else:
            logger.info(
                "Button pressed",
                extra={
                    "user_id": event.user_id,
                    "button_id": event.button_id,
                    "press_type": event.press_type,
                },
            )
            background_tasks.add_task(
                capture_service.on_button_press,
                event.user_id,
                event.press_type or "short",
                event.button_id,
            )
        return {"status": "ok"}

    return app
