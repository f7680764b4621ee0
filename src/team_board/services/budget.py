"""Budget accumulation from chat text."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from team_board.domain.errors import ApplicationError, TransportError, ValidationError
from team_board.domain.models import Budget
from team_board.domain.state import AppState
from team_board.services.busy import BusyTracker

DEFAULT_CURRENCY_MARKERS = (
    "dólares",
    "dolares",
    "dollars",
    "dollar",
    "usd",
    "$",
    "pesos",
    "peso",
    "euros",
    "euro",
    "€",
)

_logger = logging.getLogger(__name__)


def build_amount_pattern(markers: Iterable[str]) -> re.Pattern[str]:
    """Compile the amount pattern: a number followed by a currency marker."""
    ordered = sorted(set(markers), key=len, reverse=True)
    escaped = [re.escape(marker) for marker in ordered]
    if not escaped:
        raise ValueError("At least one currency marker is required")
    return re.compile(rf"(\d+(?:\.\d+)?)\s*(?:{'|'.join(escaped)})", re.IGNORECASE)


AMOUNT_PATTERN = build_amount_pattern(DEFAULT_CURRENCY_MARKERS)


def find_amounts(text: str, pattern: re.Pattern[str] = AMOUNT_PATTERN) -> list[Decimal]:
    """Return every amount mentioned in the text, left to right."""
    return [Decimal(match.group(1)) for match in pattern.finditer(text)]


def extract_amount(text: str, pattern: re.Pattern[str] = AMOUNT_PATTERN) -> Decimal:
    """Return the sum of every amount mentioned in the text."""
    return sum(find_amounts(text, pattern), Decimal(0))


class BudgetRepository(Protocol):
    """Persistence interface for per-team budget totals."""

    async def get_budget(self, team_id: str) -> Decimal:
        """Return the current total, zero when none was recorded."""

    async def increment_budget(self, team_id: str, amount: Decimal) -> Decimal:
        """Add to the total and return the new value."""


@dataclass
class BudgetService:
    """Reads and grows the focused team's budget. Totals never decrease."""

    repository: BudgetRepository
    state: AppState
    busy: BusyTracker

    async def load_budget(self, team_id: str) -> Decimal | None:
        """Fetch the total for display; failures leave it unknown."""
        try:
            async with self.busy.track():
                total = await self.repository.get_budget(team_id)
        except (TransportError, ApplicationError) as exc:
            _logger.warning("Failed to load budget for team %s: %s", team_id, exc)
            total = None
        if self._in_focus(team_id):
            self.state.budget = None if total is None else Budget(team_id, total)
        return total

    async def update_budget(self, team_id: str, delta: Decimal) -> Decimal:
        """Add a non-negative amount to a team's budget."""
        if delta < 0:
            raise ValidationError("Budget can only grow")
        async with self.busy.track():
            total = await self.repository.increment_budget(team_id, delta)
        _logger.info("Budget for team %s is now %s (+%s)", team_id, total, delta)
        if self._in_focus(team_id):
            self.state.budget = Budget(team_id, total)
        return total

    def _in_focus(self, team_id: str) -> bool:
        team = self.state.current_team
        return team is not None and team.id == team_id
