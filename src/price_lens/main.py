"""Command-line entrypoint that serves the app with uvicorn."""

import uvicorn

from price_lens.api.app import create_app
from price_lens.config import Settings
from price_lens.containers import build_container


def main() -> None:
    """Build the app from environment settings and serve it."""
    settings = Settings()
    app = create_app(build_container(settings))
    uvicorn.run(app, host="0.0.0.0", port=settings.port)  # noqa: S104


if __name__ == "__main__":
    main()
