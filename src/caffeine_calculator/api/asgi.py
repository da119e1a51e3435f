"""ASGI entrypoint for the caffeine calculator API."""

from caffeine_calculator.api.app import create_app
from caffeine_calculator.containers import build_container

app = create_app(build_container())
