"""Photo gallery with slideshow and modal view."""

import asyncio
import base64
import contextlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from team_board.adapters.store_client import StoreClient
from team_board.domain.errors import (
    ApplicationError,
    NavigationError,
    TransportError,
    ValidationError,
)
from team_board.domain.models import Photo, Team
from team_board.domain.state import AppState, GalleryState
from team_board.services.busy import BusyTracker

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoUpload:
    """A file picked for upload."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass
class PhotoGallery:
    """Controller for the focused team's photos.

    While more than one photo is cached a background task advances the
    slideshow every ``interval_seconds``.
    """

    store: StoreClient
    state: AppState
    busy: BusyTracker
    interval_seconds: float = 3.0
    _slideshow: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def view(self) -> GalleryState:
        return self.state.gallery

    @property
    def slideshow_running(self) -> bool:
        """Return whether the auto-advance task is alive."""
        return self._slideshow is not None and not self._slideshow.done()

    async def load(self, team_id: str) -> list[Photo]:
        """Replace the cached photos for a team; failures leave it empty."""
        try:
            async with self.busy.track():
                photos = await self.store.list_photos(team_id)
        except (TransportError, ApplicationError) as exc:
            _logger.warning("Failed to load photos for team %s: %s", team_id, exc)
            photos = []
        if not self._in_focus(team_id):
            _logger.debug("Dropping photos for team %s no longer in focus", team_id)
            return photos
        await self._replace(photos)
        return photos

    def advance(self, direction: int) -> int:
        """Move the current index by one step, wrapping around."""
        if direction not in (1, -1):
            raise ValidationError("Direction must be 1 or -1")
        view = self.view
        if not view.photos:
            return 0
        view.current_index = (view.current_index + direction) % len(view.photos)
        return view.current_index

    async def upload(self, files: Sequence[PhotoUpload]) -> int:
        """Upload files one by one, then reload from the store.

        Failed files are logged and skipped. Returns how many were stored.
        """
        team = self._require_team()
        if not files:
            raise ValidationError("Select at least one photo")
        stored = 0
        async with self.busy.track():
            for upload in files:
                try:
                    image_data = encode_image(upload.content, upload.content_type)
                    await self.store.upload_photo(
                        team.id, image_data, datetime.now(tz=UTC)
                    )
                except (TransportError, ApplicationError, ValidationError):
                    _logger.exception("Failed to upload photo %s", upload.filename)
                    continue
                stored += 1
            await self.load(team.id)
        _logger.info("Uploaded %s of %s photos to team %s", stored, len(files), team.id)
        return stored

    def focus(self, photo_id: str) -> Photo:
        """Open a cached photo in the modal view."""
        for photo in self.view.photos:
            if photo.id == photo_id:
                self.view.focused = photo
                self.view.zoomed = False
                return photo
        raise ValidationError(f"Unknown photo {photo_id}")

    def unfocus(self) -> None:
        """Close the modal view."""
        self.view.focused = None
        self.view.zoomed = False

    def toggle_zoom(self) -> bool:
        """Flip zoom on the open photo."""
        if self.view.focused is None:
            raise ValidationError("No photo is open")
        self.view.zoomed = not self.view.zoomed
        return self.view.zoomed

    async def delete(self, *, confirm: bool) -> bool:
        """Delete the open photo once the user has confirmed.

        Store failures propagate and leave the cached photos untouched.
        """
        photo = self.view.focused
        if photo is None:
            raise ValidationError("No photo is open")
        if not confirm:
            return False
        team = self._require_team()
        async with self.busy.track():
            await self.store.delete_photo(photo.id)
        _logger.info("Deleted photo %s from team %s", photo.id, team.id)
        self.unfocus()
        await self.load(team.id)
        return True

    async def stop_slideshow(self) -> None:
        """Cancel the auto-advance task and wait for it to finish."""
        task, self._slideshow = self._slideshow, None
        await _cancel(task)

    async def _replace(self, photos: list[Photo]) -> None:
        view = self.view
        view.photos = photos
        view.current_index = 0
        if view.focused is not None and all(p.id != view.focused.id for p in photos):
            self.unfocus()
        # Swap tasks before awaiting so an overlapping reload sees the new one.
        previous, self._slideshow = self._slideshow, None
        if len(photos) > 1:
            self._slideshow = asyncio.create_task(self._run_slideshow())
        await _cancel(previous)

    async def _run_slideshow(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.advance(1)

    def _in_focus(self, team_id: str) -> bool:
        team = self.state.current_team
        return team is not None and team.id == team_id

    def _require_team(self) -> Team:
        team = self.state.current_team
        if team is None:
            raise NavigationError("Open a team first")
        return team


async def _cancel(task: asyncio.Task[None] | None) -> None:
    if task is None or task.done():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


def encode_image(content: bytes, content_type: str | None = None) -> str:
    """Encode image bytes as a base64 data URL."""
    if not content:
        raise ValidationError("Empty image file")
    mime_type = content_type if _is_image_type(content_type) else None
    mime_type = mime_type or _detect_mime_type(content)
    encoded = base64.b64encode(content).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _is_image_type(content_type: str | None) -> bool:
    return bool(content_type) and content_type.startswith("image/")


def _detect_mime_type(content: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"
