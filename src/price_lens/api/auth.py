"""User identity and webhook authentication."""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from price_lens.containers import AppContainer

FRONTEND_TOKEN_PARAM = "aos_frontend_token"


def sign_frontend_token(user_id: str, api_key: str) -> str:
    """Return the frontend token that identifies a user to the webview."""
    return f"{user_id}:{_token_digest(user_id, api_key)}"


def verify_frontend_token(token: str, api_key: str) -> str | None:
    """Return the user id encoded in a valid token, otherwise None."""
    user_id, separator, digest = token.rpartition(":")
    if not separator or not user_id or not digest:
        return None
    if not hmac.compare_digest(digest, _token_digest(user_id, api_key)):
        return None
    return user_id


def _token_digest(user_id: str, api_key: str) -> str:
    key_hash = hashlib.sha256(api_key.encode("utf-8")).hexdigest()
    return hashlib.sha256(f"{user_id}{key_hash}".encode()).hexdigest()


def _get_api_key(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.glasses_api_key


def extract_frontend_token(request: Request) -> str | None:
    """Find the frontend token in the query string, cookies or bearer header."""
    token = request.query_params.get(FRONTEND_TOKEN_PARAM) or request.cookies.get(
        FRONTEND_TOKEN_PARAM
    )
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def current_user_id(
    request: Request, api_key: str = Depends(_get_api_key)
) -> str | None:
    """Resolve the authenticated user id, if the request carries one."""
    token = extract_frontend_token(request)
    if token is None:
        return None
    return verify_frontend_token(token, api_key)


async def require_glasses_cloud(
    x_api_key: str | None = Header(default=None),
    api_key: str = Depends(_get_api_key),
) -> None:
    """Ensure webhook requests carry the app API key."""
    if not x_api_key or not hmac.compare_digest(x_api_key, api_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
