"""ASGI entrypoint for the citizen reports bot."""

from citizen_reports.api.app import create_app
from citizen_reports.containers import build_container

app = create_app(build_container())
