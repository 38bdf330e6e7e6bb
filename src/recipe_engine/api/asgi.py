"""ASGI entrypoint for the recipe engine API."""

from recipe_engine.api.app import create_app
from recipe_engine.containers import build_container

app = create_app(build_container())
