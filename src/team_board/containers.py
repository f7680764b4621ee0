"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from team_board.adapters.local_budget_repository import LocalBudgetRepository
from team_board.adapters.local_state import JsonFileStateStorage, StateStorage
from team_board.adapters.openai_transcriber import OpenAITranscriber
from team_board.adapters.store_client import HttpxStoreClient, StoreClient
from team_board.adapters.supabase_store_client import SupabaseStoreClient
from team_board.config import Settings, parse_currency_markers
from team_board.domain.state import AppState
from team_board.services.budget import (
    AMOUNT_PATTERN,
    BudgetRepository,
    BudgetService,
    build_amount_pattern,
)
from team_board.services.busy import BusyTracker
from team_board.services.chat import ChatService
from team_board.services.gallery import PhotoGallery
from team_board.services.navigation import Navigator
from team_board.services.sessions import SessionManager
from team_board.services.teams import TeamService
from team_board.services.voice import VoiceInput


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state: AppState
    busy: BusyTracker
    store_client: StoreClient
    storage: StateStorage
    session_manager: SessionManager
    team_service: TeamService
    gallery: PhotoGallery
    budget_service: BudgetService
    chat_service: ChatService
    voice_input: VoiceInput
    navigator: Navigator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    state = AppState()
    busy = BusyTracker()
    storage = JsonFileStateStorage(resolved_settings.state_file)

    http_store: HttpxStoreClient | None = None
    store_client: StoreClient
    if resolved_settings.store_backend == "supabase":
        store_client = SupabaseStoreClient(
            create_client(
                resolved_settings.supabase_url,
                resolved_settings.supabase_service_key,
            )
        )
    else:
        http_store = HttpxStoreClient.create(
            resolved_settings.store_url,
            timeout=resolved_settings.request_timeout_seconds,
        )
        store_client = http_store

    budget_repository: BudgetRepository
    if resolved_settings.budget_backend == "remote":
        budget_repository = store_client
    else:
        budget_repository = LocalBudgetRepository(storage)

    markers = parse_currency_markers(resolved_settings.currency_markers)
    amount_pattern = build_amount_pattern(markers) if markers else AMOUNT_PATTERN

    transcriber: OpenAITranscriber | None = None
    if resolved_settings.openai_api_key:
        transcriber = OpenAITranscriber.create(
            resolved_settings.openai_api_key,
            model=resolved_settings.transcription_model,
            language=resolved_settings.transcription_language,
        )

    session_manager = SessionManager(
        store=store_client, storage=storage, state=state, busy=busy
    )
    team_service = TeamService(store=store_client, state=state, busy=busy)
    gallery = PhotoGallery(
        store=store_client,
        state=state,
        busy=busy,
        interval_seconds=resolved_settings.slideshow_interval_seconds,
    )
    budget_service = BudgetService(repository=budget_repository, state=state, busy=busy)
    chat_service = ChatService(
        store=store_client,
        budget_service=budget_service,
        state=state,
        busy=busy,
        amount_pattern=amount_pattern,
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
        if http_store is not None:
            await http_store.close()
        if transcriber is not None:
            await transcriber.close()

    return AppContainer(
        settings=resolved_settings,
        state=state,
        busy=busy,
        store_client=store_client,
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
