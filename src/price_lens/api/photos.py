"""Photo, analysis, speech and store lookup endpoints for the webview."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, Response

from price_lens.api.auth import current_user_id

if TYPE_CHECKING:
    from price_lens.containers import AppContainer
    from price_lens.domain.photos import CapturedPhoto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["photos"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _not_authenticated() -> JSONResponse:
    return _error(status.HTTP_401_UNAUTHORIZED, "Not authenticated")


def _epoch_ms(photo: CapturedPhoto) -> int:
    return int(photo.timestamp.timestamp() * 1000)


@router.get("/latest-photo")
async def latest_photo(
    request: Request, user_id: str | None = Depends(current_user_id)
) -> Response:
    """Return metadata for the user's most recent photo."""
    if user_id is None:
        logger.info("Unauthenticated request to /api/latest-photo")
        return _not_authenticated()
    container: AppContainer = request.app.state.container
    photo = container.photo_repository.get_latest(user_id)
    if photo is None:
        return _error(status.HTTP_404_NOT_FOUND, "No photo available")
    return JSONResponse(
        {
            "requestId": photo.request_id,
            "timestamp": _epoch_ms(photo),
            "hasPhoto": True,
        }
    )


@router.get("/photo/{request_id}")
async def photo_bytes(
    request_id: str,
    request: Request,
    user_id: str | None = Depends(current_user_id),
) -> Response:
    """Return the raw bytes of one photo."""
    if user_id is None:
        return _not_authenticated()
    container: AppContainer = request.app.state.container
    photo = container.photo_repository.get_photo(user_id, request_id)
    if photo is None:
        return _error(status.HTTP_404_NOT_FOUND, "Photo not found")
    return Response(
        content=photo.data,
        media_type=photo.mime_type,
        headers={"Cache-Control": "no-cache"},
    )


@router.get("/latest-analysis")
@router.get("/gemini-analysis", include_in_schema=False)
async def latest_analysis(
    request: Request, user_id: str | None = Depends(current_user_id)
) -> Response:
    """Return the analysis of the user's most recent photo."""
    if user_id is None:
        return _not_authenticated()
    container: AppContainer = request.app.state.container
    photo = container.photo_repository.get_latest(user_id)
    if photo is None:
        return _error(status.HTTP_404_NOT_FOUND, "No photo available")
    if photo.analysis is None:
        return _error(status.HTTP_404_NOT_FOUND, "No analysis available yet")
    return JSONResponse({"analysis": photo.analysis})


@router.get("/photos")
async def list_photos(
    request: Request, user_id: str | None = Depends(current_user_id)
) -> Response:
    """Return summaries of every photo for the user."""
    if user_id is None:
        return _not_authenticated()
    container: AppContainer = request.app.state.container
    photos = container.photo_repository.list_photos(user_id)
    return JSONResponse(
        {
            "photos": [
                {
                    "requestId": photo.request_id,
                    "timestamp": _epoch_ms(photo),
                    "mimeType": photo.mime_type,
                    "hasAnalysis": photo.has_analysis,
                }
                for photo in photos
            ]
        }
    )


@router.get("/analysis/{request_id}")
async def photo_analysis(
    request_id: str,
    request: Request,
    user_id: str | None = Depends(current_user_id),
) -> Response:
    """Return the analysis for one photo."""
    if user_id is None:
        return _not_authenticated()
    container: AppContainer = request.app.state.container
    if not container.photo_repository.list_photos(user_id):
        return _error(status.HTTP_404_NOT_FOUND, "No photos found")
    photo = container.photo_repository.get_photo(user_id, request_id)
    if photo is None:
        return _error(status.HTTP_404_NOT_FOUND, "Photo not found")
    if photo.analysis is None:
        return _error(status.HTTP_404_NOT_FOUND, "No analysis available yet")
    return JSONResponse({"analysis": photo.analysis})


@router.post("/speak-latest")
async def speak_latest(
    request: Request, user_id: str | None = Depends(current_user_id)
) -> Response:
    """Speak the start of the latest analysis on the user's glasses."""
    if user_id is None:
        return _not_authenticated()
    container: AppContainer = request.app.state.container
    photo = container.photo_repository.get_latest(user_id)
    if photo is None or photo.analysis is None:
        return _error(status.HTTP_404_NOT_FOUND, "No analysis available yet")
    state = container.session_registry.get(user_id)
    session = state.session if state else None
    try:
        result = await container.speech_service.speak(photo.analysis, session)
    except Exception:
        logger.exception("Speech synthesis failed", extra={"user_id": user_id})
        return _error(status.HTTP_502_BAD_GATEWAY, "Speech synthesis failed")
    return JSONResponse(
        {
            "audioId": result.clip.audio_id,
            "audioUrl": result.audio_url,
            "text": result.clip.text,
            "played": result.played,
        }
    )


@router.get("/audio/{audio_id}")
async def audio_clip(audio_id: str, request: Request) -> Response:
    """Serve a synthesized clip for playback on the glasses."""
    container: AppContainer = request.app.state.container
    clip = container.speech_service.get_clip(audio_id)
    if clip is None:
        return _error(status.HTTP_404_NOT_FOUND, "Audio not found")
    return Response(content=clip.data, media_type=clip.mime_type)


@router.get("/nearby-stores")
async def nearby_stores(  # noqa: PLR0913
    request: Request,
    store: str = Query(min_length=1),
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    limit: int = Query(default=5, ge=1, le=20),
    user_id: str | None = Depends(current_user_id),
) -> Response:
    """Return locations of a store ranked by distance from the user."""
    if user_id is None:
        return _not_authenticated()
    container: AppContainer = request.app.state.container
    try:
        stores = await container.places_service.nearby_stores(
            store, lat, lng, limit=limit
        )
    except Exception:
        logger.exception(
            "Nearby store lookup failed", extra={"user_id": user_id, "store": store}
        )
        return _error(status.HTTP_502_BAD_GATEWAY, "Store lookup failed")
    return JSONResponse(
        {
            "stores": [
                {
                    "name": location.name,
                    "address": location.address,
                    "latitude": location.latitude,
                    "longitude": location.longitude,
                    "distanceMeters": round(location.distance_m, 1),
                }
                for location in stores
            ]
        }
    )
