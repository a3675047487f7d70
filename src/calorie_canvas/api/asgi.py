"""ASGI entrypoint for the CalorieCanvas API."""

from calorie_canvas.api.app import create_app
from calorie_canvas.containers import build_container

app = create_app(build_container())
