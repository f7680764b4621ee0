"""Command-line entrypoint serving the team board locally."""

import uvicorn

from team_board.api.app import create_app
from team_board.containers import build_container


def main(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve the team board API."""
    uvicorn.run(create_app(build_container()), host=host, port=port)


if __name__ == "__main__":
    main()
