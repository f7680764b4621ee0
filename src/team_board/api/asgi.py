"""ASGI entrypoint for the team board API."""

from team_board.api.app import create_app
from team_board.containers import build_container

app = create_app(build_container())
