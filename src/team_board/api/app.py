"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from team_board.api.schemas import (
    AdvanceRequest,
    CreateTeamRequest,
    LoginRequest,
    SendMessageRequest,
)
from team_board.app_logging import configure_logging
from team_board.containers import AppContainer
from team_board.domain.errors import (
    ApplicationError,
    AuthError,
    AuthFailure,
    NavigationError,
    TransportError,
    ValidationError,
)
from team_board.domain.models import Message, Photo, Team
from team_board.domain.state import AppState, TeamDetail
from team_board.services.gallery import PhotoUpload

_ERROR_STATUS: dict[type[Exception], int] = {
    ValidationError: 422,
    NavigationError: status.HTTP_409_CONFLICT,
    ApplicationError: status.HTTP_400_BAD_REQUEST,
    TransportError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        screen = await app.state.container.navigator.start()
        logger.info("Starting on screen %s", screen.name)
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Team Board", lifespan=lifespan)
    app.state.container = container

    def _error_handler(status_code: int):  # type: ignore[no-untyped-def]
        async def handler(request: Request, exc: Exception) -> JSONResponse:
            logger.info("%s %s failed: %s", request.method, request.url.path, exc)
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})

        return handler

    for error_type, status_code in _ERROR_STATUS.items():
        app.add_exception_handler(error_type, _error_handler(status_code))

    @app.exception_handler(AuthError)
    async def auth_error(request: Request, exc: AuthError) -> JSONResponse:
        if exc.reason is AuthFailure.UNREACHABLE:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"detail": "Unable to reach the store", "reason": exc.reason},
            )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid email or password", "reason": exc.reason},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/state")
    async def get_state(request: Request) -> dict[str, object]:
        """Return everything needed to render the current screen."""
        return _state_view(request.app.state.container)

    @app.post("/session")
    async def login(body: LoginRequest, request: Request) -> dict[str, object]:
        """Log in and move to the team list."""
        state_container: AppContainer = request.app.state.container
        await state_container.navigator.login(body.email, body.password)
        return _state_view(state_container)

    @app.delete("/session")
    async def logout(request: Request) -> dict[str, object]:
        """Log out from any screen."""
        state_container: AppContainer = request.app.state.container
        await state_container.navigator.logout()
        return _state_view(state_container)

    @app.get("/teams")
    async def list_teams(request: Request) -> dict[str, object]:
        """Reload the team list."""
        state_container: AppContainer = request.app.state.container
        await state_container.navigator.refresh_teams()
        return {"teams": [_team_view(team) for team in state_container.state.teams]}

    @app.post("/teams", status_code=status.HTTP_201_CREATED)
    async def create_team(
        body: CreateTeamRequest, request: Request
    ) -> dict[str, object]:
        """Create a team owned by the current user."""
        state_container: AppContainer = request.app.state.container
        team = await state_container.team_service.create_team(
            body.name, body.description
        )
        return {"team": _team_view(team)}

    @app.post("/teams/{team_id}/open")
    async def open_team(team_id: str, request: Request) -> dict[str, object]:
        """Open a team's detail screen."""
        state_container: AppContainer = request.app.state.container
        await state_container.navigator.open_team(team_id)
        return _state_view(state_container)

    @app.post("/back")
    async def back(request: Request) -> dict[str, object]:
        """Return to the team list."""
        state_container: AppContainer = request.app.state.container
        await state_container.navigator.back()
        return _state_view(state_container)

    @app.post("/gallery/advance")
    async def advance(body: AdvanceRequest, request: Request) -> dict[str, object]:
        """Step the slideshow manually."""
        state_container: AppContainer = request.app.state.container
        index = state_container.gallery.advance(body.direction)
        return {"current_index": index}

    @app.post("/gallery/photos")
    async def upload_photos(
        request: Request, files: list[UploadFile] = File(default=[])  # noqa: B008
    ) -> dict[str, object]:
        """Upload one or more photos to the open team."""
        state_container: AppContainer = request.app.state.container
        uploads = [
            PhotoUpload(
                filename=upload.filename or "photo",
                content=await upload.read(),
                content_type=upload.content_type,
            )
            for upload in files
        ]
        stored = await state_container.gallery.upload(uploads)
        view = _state_view(state_container)
        return {"stored": stored, "gallery": view["gallery"]}

    @app.post("/gallery/focus/{photo_id}")
    async def focus_photo(photo_id: str, request: Request) -> dict[str, object]:
        """Open a photo in the modal view."""
        state_container: AppContainer = request.app.state.container
        state_container.gallery.focus(photo_id)
        return _state_view(state_container)["gallery"]

    @app.post("/gallery/unfocus")
    async def unfocus_photo(request: Request) -> dict[str, object]:
        """Close the modal view."""
        state_container: AppContainer = request.app.state.container
        state_container.gallery.unfocus()
        return _state_view(state_container)["gallery"]

    @app.post("/gallery/zoom")
    async def toggle_zoom(request: Request) -> dict[str, object]:
        """Toggle zoom on the open photo."""
        state_container: AppContainer = request.app.state.container
        return {"zoomed": state_container.gallery.toggle_zoom()}

    @app.delete("/gallery/focused")
    async def delete_photo(
        request: Request, confirm: bool = False
    ) -> dict[str, object]:
        """Delete the open photo when confirmed."""
        state_container: AppContainer = request.app.state.container
        deleted = await state_container.gallery.delete(confirm=confirm)
        view = _state_view(state_container)
        return {"deleted": deleted, "gallery": view["gallery"]}

    @app.post("/chat/messages", status_code=status.HTTP_201_CREATED)
    async def send_message(
        body: SendMessageRequest, request: Request
    ) -> dict[str, object]:
        """Send a chat message to the open team."""
        state_container: AppContainer = request.app.state.container
        message = await state_container.chat_service.send(body.text)
        return {
            "message": _message_view(message),
            "budget": _budget_view(state_container.state),
        }

    @app.post("/voice/toggle")
    async def toggle_recording(request: Request) -> dict[str, object]:
        """Start or stop recording."""
        state_container: AppContainer = request.app.state.container
        return {"recording": state_container.voice_input.toggle()}

    @app.post("/voice/transcript")
    async def transcribe(
        request: Request, audio: UploadFile = File(...)  # noqa: B008
    ) -> dict[str, object]:
        """Transcribe a recording into the chat draft."""
        state_container: AppContainer = request.app.state.container
        transcript = await state_container.voice_input.submit(
            await audio.read(), filename=audio.filename or "speech.webm"
        )
        return {"draft": transcript}

    return app


def _state_view(container: AppContainer) -> dict[str, object]:
    state = container.state
    gallery = state.gallery
    view: dict[str, object] = {
        "screen": state.screen.name,
        "user": state.user_email,
        "busy": container.busy.busy,
        "teams": [_team_view(team) for team in state.teams],
        "team": None,
        "gallery": {
            "photos": [_photo_view(photo) for photo in gallery.photos],
            "current_index": gallery.current_index,
            "focused": gallery.focused.id if gallery.focused else None,
            "zoomed": gallery.zoomed,
            "slideshow": container.gallery.slideshow_running,
        },
        "chat": {
            "messages": [_message_view(message) for message in state.chat.messages],
            "draft": state.chat.draft,
            "recording": state.chat.recording,
            "voice_available": container.voice_input.available,
        },
        "budget": _budget_view(state),
    }
    if isinstance(state.screen, TeamDetail):
        view["team"] = _team_view(state.screen.team)
    return view


def _team_view(team: Team) -> dict[str, object]:
    return {
        "id": team.id,
        "name": team.name,
        "description": team.description,
        "owner_email": team.owner_email,
    }


def _photo_view(photo: Photo) -> dict[str, object]:
    return {
        "id": photo.id,
        "team_id": photo.team_id,
        "image_data": photo.image_data,
        "uploaded_at": photo.uploaded_at.isoformat() if photo.uploaded_at else None,
    }


def _message_view(message: Message) -> dict[str, object]:
    return {
        "id": message.id,
        "sender_email": message.sender_email,
        "text": message.text,
        "timestamp": message.timestamp.isoformat() if message.timestamp else None,
        "status": message.status.value,
    }


def _budget_view(state: AppState) -> dict[str, object] | None:
    if state.budget is None:
        return None
    return {"total": str(state.budget.total), "display": state.budget.display()}
