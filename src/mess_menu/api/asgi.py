"""ASGI entrypoint for the mess menu API."""

from mess_menu.api.app import create_app
from mess_menu.containers import build_container

app = create_app(build_container())
