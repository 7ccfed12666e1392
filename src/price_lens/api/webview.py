"""Photo viewer page opened from the glasses companion app."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse

from price_lens.api.auth import FRONTEND_TOKEN_PARAM, current_user_id

router = APIRouter(tags=["webview"])


@router.get("/webview", response_class=HTMLResponse)
async def webview(
    request: Request, user_id: str | None = Depends(current_user_id)
) -> HTMLResponse:
    """Serve the photo viewer and remember the caller's token in a cookie."""
    if user_id is None:
        return HTMLResponse(
            _NOT_AUTHENTICATED_HTML, status_code=status.HTTP_401_UNAUTHORIZED
        )
    response = HTMLResponse(_PHOTO_VIEWER_HTML)
    token = request.query_params.get(FRONTEND_TOKEN_PARAM)
    if token:
        response.set_cookie(
            FRONTEND_TOKEN_PARAM, token, httponly=True, samesite="lax"
        )
    return response


_NOT_AUTHENTICATED_HTML = """<!doctype html>
<html lang="en">
  <head><title>Photo Viewer - Not Authenticated</title></head>
  <body style="font-family: Arial, sans-serif; text-align: center; padding: 50px;">
    <h1>Please open this page from the glasses companion app</h1>
  </body>
</html>
"""

_PHOTO_VIEWER_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Price Lens</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 1rem; }
      img { max-width: 100%; border-radius: 8px; }
      pre { background: #f6f6f6; padding: 1rem; white-space: pre-wrap; }
      .thumbs img { width: 72px; margin: 0.25rem; cursor: pointer; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
    </style>
  </head>
  <body>
    <h1>Price Lens</h1>
    <div id="latest">Waiting for a photo...</div>
    <div class="row">
      <button onclick="speakLatest()">Speak analysis</button>
    </div>
    <pre id="analysis">No analysis yet.</pre>
    <h2>All photos</h2>
    <div class="thumbs" id="thumbs"></div>
    <script>
      let current = null;

      async function getJson(path, options) {
        const init = Object.assign({ credentials: 'same-origin' }, options);
        const res = await fetch(path, init);
        if (!res.ok) {
          return null;
        }
        return res.json();
      }

      async function showPhoto(requestId) {
        current = requestId;
        document.getElementById('latest').innerHTML =
          '<img src="/api/photo/' + encodeURIComponent(requestId) + '" />';
        const data = await getJson('/api/analysis/' + encodeURIComponent(requestId));
        document.getElementById('analysis').textContent =
          data ? data.analysis : 'Analyzing...';
      }

      async function refresh() {
        const latest = await getJson('/api/latest-photo');
        if (latest && latest.requestId !== current) {
          await showPhoto(latest.requestId);
        } else if (current) {
          await showPhoto(current);
        }
        const list = await getJson('/api/photos');
        if (!list) {
          return;
        }
        const thumbs = document.getElementById('thumbs');
        thumbs.innerHTML = '';
        list.photos.slice().reverse().forEach(function (photo) {
          const img = document.createElement('img');
          img.src = '/api/photo/' + encodeURIComponent(photo.requestId);
          img.title = new Date(photo.timestamp).toLocaleString();
          img.onclick = function () { showPhoto(photo.requestId); };
          thumbs.appendChild(img);
        });
      }

      async function speakLatest() {
        const data = await getJson('/api/speak-latest', { method: 'POST' });
        document.getElementById('analysis').dataset.spoken = data ? data.text : '';
      }

      refresh();
      setInterval(refresh, 3000);
    </script>
  </body>
</html>
"""
