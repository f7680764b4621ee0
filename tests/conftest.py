"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from team_board.adapters.local_budget_repository import LocalBudgetRepository
from team_board.adapters.local_state import StateStorage
from team_board.adapters.store_client import StoreClient
from team_board.config import Settings
from team_board.containers import AppContainer
from team_board.domain.errors import ApplicationError, TransportError
from team_board.domain.models import Message, Photo, Team
from team_board.domain.state import AppState
from team_board.services.budget import BudgetRepository, BudgetService
from team_board.services.busy import BusyTracker
from team_board.services.chat import ChatService
from team_board.services.gallery import PhotoGallery
from team_board.services.navigation import Navigator
from team_board.services.sessions import SessionManager
from team_board.services.teams import TeamService
from team_board.services.voice import Transcriber, VoiceInput


@dataclass
class InMemoryStoreClient(StoreClient):
    """In-memory record store for tests.

    Method names listed in ``fail`` raise a transport error, names in
    ``reject`` raise an application error.
    """

    users: dict[str, str] = field(
        default_factory=lambda: {"ana@example.com": "secret"}
    )
    teams: list[Team] = field(default_factory=list)
    photos: list[Photo] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    budgets: dict[str, Decimal] = field(default_factory=dict)
    fail: set[str] = field(default_factory=set)
    reject: set[str] = field(default_factory=set)
    upload_errors: list[Exception | None] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    next_id: int = 0

    def _enter(self, action: str) -> None:
        self.calls.append(action)
        if action in self.fail:
            raise TransportError(f"{action} unreachable")
        if action in self.reject:
            raise ApplicationError(f"{action} rejected")

    def _new_id(self) -> str:
        self.next_id += 1
        return str(self.next_id)

    async def authenticate(self, email: str, password: str) -> bool:
        self._enter("authenticate")
        return self.users.get(email) == password

    async def list_teams(self, owner_email: str) -> list[Team]:
        self._enter("list_teams")
        return [team for team in self.teams if team.owner_email == owner_email]

    async def create_team(self, owner_email: str, name: str, description: str) -> Team:
        self._enter("create_team")
        team = Team(
            id=f"team-{self._new_id()}",
            name=name,
            description=description,
            owner_email=owner_email,
        )
        self.teams.append(team)
        return team

    async def list_photos(self, team_id: str) -> list[Photo]:
        self._enter("list_photos")
        return [photo for photo in self.photos if photo.team_id == team_id]

    async def upload_photo(
        self, team_id: str, image_data: str, uploaded_at: datetime
    ) -> None:
        self._enter("upload_photo")
        if self.upload_errors:
            error = self.upload_errors.pop(0)
            if error is not None:
                raise error
        self.photos.append(
            Photo(
                id=f"photo-{self._new_id()}",
                team_id=team_id,
                image_data=image_data,
                uploaded_at=uploaded_at,
            )
        )

    async def delete_photo(self, photo_id: str) -> None:
        self._enter("delete_photo")
        self.photos = [photo for photo in self.photos if photo.id != photo_id]

    async def list_messages(self, team_id: str) -> list[Message]:
        self._enter("list_messages")
        return [message for message in self.messages if message.team_id == team_id]

    async def save_message(
        self, team_id: str, sender_email: str, text: str, timestamp: datetime
    ) -> None:
        self._enter("save_message")
        self.messages.append(
            Message(
                id=f"message-{self._new_id()}",
                team_id=team_id,
                sender_email=sender_email,
                text=text,
                timestamp=timestamp,
            )
        )

    async def get_budget(self, team_id: str) -> Decimal:
        self._enter("get_budget")
        return self.budgets.get(team_id, Decimal(0))

    async def increment_budget(self, team_id: str, amount: Decimal) -> Decimal:
        self._enter("increment_budget")
        total = self.budgets.get(team_id, Decimal(0)) + amount
        self.budgets[team_id] = total
        return total


@dataclass
class InMemoryStateStorage(StateStorage):
    """In-memory local state for tests."""

    values: dict[str, object] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        return self.values.get(key)

    def set(self, key: str, value: object) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


@dataclass
class RecordingBudgetRepository(BudgetRepository):
    """Budget repository that records every increment."""

    totals: dict[str, Decimal] = field(default_factory=dict)
    increments: list[Decimal] = field(default_factory=list)

    async def get_budget(self, team_id: str) -> Decimal:
        return self.totals.get(team_id, Decimal(0))

    async def increment_budget(self, team_id: str, amount: Decimal) -> Decimal:
        self.increments.append(amount)
        self.totals[team_id] = self.totals.get(team_id, Decimal(0)) + amount
        return self.totals[team_id]


@dataclass
class FakeTranscriber(Transcriber):
    """Fake transcriber returning fixed text."""

    text: str = "lunch was 20 dollars"
    error: Exception | None = None
    clips: list[tuple[bytes, str]] = field(default_factory=list)

    async def transcribe(self, audio: bytes, filename: str) -> str:
        self.clips.append((audio, filename))
        if self.error is not None:
            raise self.error
        return self.text


def make_container(  # noqa: PLR0913
    settings: Settings,
    store: StoreClient,
    storage: StateStorage,
    *,
    budget_repository: BudgetRepository | None = None,
    transcriber: Transcriber | None = None,
    busy: BusyTracker | None = None,
) -> AppContainer:
    """Wire the application around test doubles."""
    state = AppState()
    busy = busy or BusyTracker()
    session_manager = SessionManager(
        store=store, storage=storage, state=state, busy=busy
    )
    team_service = TeamService(store=store, state=state, busy=busy)
    gallery = PhotoGallery(
        store=store,
        state=state,
        busy=busy,
        interval_seconds=settings.slideshow_interval_seconds,
    )
    budget_service = BudgetService(
        repository=budget_repository or LocalBudgetRepository(storage),
        state=state,
        busy=busy,
    )
    chat_service = ChatService(
        store=store, budget_service=budget_service, state=state, busy=busy
    )
    voice_input = VoiceInput(state=state, transcriber=transcriber)
    navigator = Navigator(
        state=state,
        sessions=session_manager,
        teams=team_service,
        gallery=gallery,
        chat=chat_service,
        budget=budget_service,
    )

    async def close_resources() -> None:
        await gallery.stop_slideshow()

    return AppContainer(
        settings=settings,
        state=state,
        busy=busy,
        store_client=store,
        storage=storage,
        session_manager=session_manager,
        team_service=team_service,
        gallery=gallery,
        budget_service=budget_service,
        chat_service=chat_service,
        voice_input=voice_input,
        navigator=navigator,
        close_resources=close_resources,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        store_url="https://script.example.com/exec",
        state_file=tmp_path / "state.json",
    )


@pytest.fixture
def store() -> InMemoryStoreClient:
    return InMemoryStoreClient()


@pytest.fixture
def storage() -> InMemoryStateStorage:
    return InMemoryStateStorage()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryStoreClient,
    storage: InMemoryStateStorage,
) -> AppContainer:
    return make_container(settings, store, storage)
