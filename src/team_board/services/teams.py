"""Team list and team creation."""

import logging
from dataclasses import dataclass

from team_board.adapters.store_client import StoreClient
from team_board.domain.errors import (
    ApplicationError,
    NavigationError,
    TransportError,
    ValidationError,
)
from team_board.domain.models import Team
from team_board.domain.state import AppState
from team_board.services.busy import BusyTracker

_logger = logging.getLogger(__name__)


@dataclass
class TeamService:
    """Application service for the logged-in user's teams."""

    store: StoreClient
    state: AppState
    busy: BusyTracker

    async def load_teams(self) -> list[Team]:
        """Replace the cached team list; failures leave it empty."""
        email = self.state.user_email
        if email is None:
            self.state.teams = []
            return []
        try:
            async with self.busy.track():
                teams = await self.store.list_teams(email)
        except (TransportError, ApplicationError) as exc:
            _logger.warning("Failed to load teams for %s: %s", email, exc)
            teams = []
        if self.state.user_email == email:
            self.state.teams = teams
        return teams

    async def create_team(self, name: str, description: str = "") -> Team:
        """Create a team owned by the current user and cache it."""
        email = self.state.user_email
        if email is None:
            raise NavigationError("Log in to create a team")
        name = name.strip()
        if not name:
            raise ValidationError("Team name is required")

        async with self.busy.track():
            team = await self.store.create_team(email, name, description.strip())
        if not team.id:
            raise ApplicationError("Store returned a team without an id")
        self.state.teams.append(team)
        _logger.info("Created team %s (%s)", team.name, team.id)
        return team

    def find(self, team_id: str) -> Team | None:
        """Return a cached team by id."""
        for team in self.state.teams:
            if team.id == team_id:
                return team
        return None
