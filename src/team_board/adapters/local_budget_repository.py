"""Budget totals kept in local durable state."""

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from team_board.adapters.local_state import StateStorage
from team_board.adapters.store_models import parse_total
from team_board.domain.errors import TransportError
from team_board.services.budget import BudgetRepository

_logger = logging.getLogger(__name__)


@dataclass
class LocalBudgetRepository(BudgetRepository):
    """Per-team totals stored under ``budget_<team id>`` keys.

    Increments are serialised within this process only; another process writing
    the same file can still lose an update.
    """

    storage: StateStorage
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def get_budget(self, team_id: str) -> Decimal:
        """Return the stored total, defaulting to zero."""
        return self._read(team_id)

    async def increment_budget(self, team_id: str, amount: Decimal) -> Decimal:
        """Add to the stored total and persist it."""
        async with self._lock:
            total = self._read(team_id) + amount
            try:
                self.storage.set(_budget_key(team_id), str(total))
            except OSError as exc:
                raise TransportError(f"Unable to save budget: {exc}") from exc
        return total

    def _read(self, team_id: str) -> Decimal:
        raw = self.storage.get(_budget_key(team_id))
        total = parse_total(raw)
        if total is None:
            _logger.warning("Resetting unreadable budget for team %s: %r", team_id, raw)
            return Decimal(0)
        return total


def _budget_key(team_id: str) -> str:
    return f"budget_{team_id}"
