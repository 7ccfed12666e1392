"""ASGI entrypoint for the price lens API."""

from price_lens.api.app import create_app
from price_lens.containers import build_container

app = create_app(build_container())
