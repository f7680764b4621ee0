"""Screen state machine driving every data load."""

import asyncio
import logging
from dataclasses import dataclass, field

from team_board.domain.errors import NavigationError, ValidationError
from team_board.domain.models import Session
from team_board.domain.state import AppState, LoggedOut, Screen, TeamDetail, TeamList
from team_board.services.budget import BudgetService
from team_board.services.chat import ChatService
from team_board.services.gallery import PhotoGallery
from team_board.services.sessions import SessionManager
from team_board.services.teams import TeamService

_logger = logging.getLogger(__name__)

_TEAM_LIST_KEY = "team_list"


@dataclass
class Navigator:
    """Moves between the login, team list and team detail screens.

    Each transition sets the new screen before starting its loads. A transition
    whose loads are still running is ignored when requested again.
    """

    state: AppState
    sessions: SessionManager
    teams: TeamService
    gallery: PhotoGallery
    chat: ChatService
    budget: BudgetService
    _pending: set[str] = field(default_factory=set, init=False, repr=False)

    @property
    def screen(self) -> Screen:
        return self.state.screen

    async def start(self) -> Screen:
        """Pick the initial screen from the persisted session."""
        session = self.sessions.restore()
        if not session.authenticated:
            self.state.screen = LoggedOut()
            return self.state.screen
        self.state.screen = TeamList()
        await self._load_team_list()
        return self.state.screen

    async def login(self, email: str, password: str) -> Session:
        """Log in and show the team list."""
        if not isinstance(self.state.screen, LoggedOut):
            raise NavigationError("Already logged in")
        session = await self.sessions.login(email, password)
        self.state.screen = TeamList()
        await self._load_team_list()
        return session

    async def refresh_teams(self) -> Screen:
        """Reload the team list while it is shown."""
        if not isinstance(self.state.screen, TeamList):
            raise NavigationError("The team list is not shown")
        await self._load_team_list()
        return self.state.screen

    async def open_team(self, team_id: str) -> Screen:
        """Show a team and load its photos, messages and budget together."""
        key = f"team:{team_id}"
        if key in self._pending:
            _logger.info("Ignoring repeated transition to team %s", team_id)
            return self.state.screen
        if not isinstance(self.state.screen, TeamList):
            raise NavigationError("Teams can only be opened from the team list")
        team = self.teams.find(team_id)
        if team is None:
            raise ValidationError(f"Unknown team {team_id}")

        self.state.clear_team_scope()
        self.state.screen = TeamDetail(team=team)
        self._pending.add(key)
        try:
            await asyncio.gather(
                self.gallery.load(team.id),
                self.chat.load_messages(team.id),
                self.budget.load_budget(team.id),
            )
        finally:
            self._pending.discard(key)
        return self.state.screen

    async def back(self) -> Screen:
        """Leave the team detail screen for the team list."""
        if not isinstance(self.state.screen, TeamDetail):
            raise NavigationError("No team is open")
        await self.gallery.stop_slideshow()
        self.state.clear_team_scope()
        self.state.screen = TeamList()
        await self._load_team_list()
        return self.state.screen

    async def logout(self) -> Screen:
        """Log out from any screen and drop every cache."""
        await self.gallery.stop_slideshow()
        self.sessions.logout()
        self.state.teams = []
        self.state.clear_team_scope()
        self.state.screen = LoggedOut()
        return self.state.screen

    async def _load_team_list(self) -> None:
        if _TEAM_LIST_KEY in self._pending:
            _logger.info("Team list is already loading")
            return
        self._pending.add(_TEAM_LIST_KEY)
        try:
            await self.teams.load_teams()
        finally:
            self._pending.discard(_TEAM_LIST_KEY)
