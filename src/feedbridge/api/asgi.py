"""ASGI entrypoint for the Feedbridge API."""

from feedbridge.api.app import create_app
from feedbridge.containers import build_container

app = create_app(build_container())
