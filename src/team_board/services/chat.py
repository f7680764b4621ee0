"""Team chat with budget tracking."""

import logging
import re
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from uuid import uuid4

from team_board.adapters.store_client import StoreClient
from team_board.domain.errors import (
    ApplicationError,
    NavigationError,
    TeamBoardError,
    TransportError,
    ValidationError,
)
from team_board.domain.models import DeliveryStatus, Message
from team_board.domain.state import AppState
from team_board.services.budget import AMOUNT_PATTERN, BudgetService, extract_amount
from team_board.services.busy import BusyTracker

_logger = logging.getLogger(__name__)


@dataclass
class ChatService:
    """Messages for the focused team.

    Sent messages show up immediately as pending and are marked confirmed or
    failed once the store answers.
    """

    store: StoreClient
    budget_service: BudgetService
    state: AppState
    busy: BusyTracker
    amount_pattern: re.Pattern[str] = AMOUNT_PATTERN

    async def load_messages(self, team_id: str) -> list[Message]:
        """Replace the cached messages for a team; failures leave it empty."""
        try:
            async with self.busy.track():
                messages = await self.store.list_messages(team_id)
        except (TransportError, ApplicationError) as exc:
            _logger.warning("Failed to load messages for team %s: %s", team_id, exc)
            messages = []
        team = self.state.current_team
        if team is not None and team.id == team_id:
            self.state.chat.messages = messages
        return messages

    async def send(self, text: str) -> Message:
        """Send a message and add any amounts it mentions to the budget."""
        body = text.strip()
        if not body:
            raise ValidationError("Message is empty")
        team = self.state.current_team
        email = self.state.user_email
        if team is None or email is None:
            raise NavigationError("Open a team first")

        timestamp = datetime.now(tz=UTC)
        pending = Message(
            id=f"local-{uuid4()}",
            team_id=team.id,
            sender_email=email,
            text=body,
            timestamp=timestamp,
            status=DeliveryStatus.PENDING,
        )
        self.state.chat.messages.append(pending)
        try:
            async with self.busy.track():
                await self.store.save_message(team.id, email, body, timestamp)
        except (TransportError, ApplicationError):
            self._reconcile(pending, DeliveryStatus.FAILED)
            raise
        sent = self._reconcile(pending, DeliveryStatus.CONFIRMED)
        self.state.chat.draft = ""

        amount = extract_amount(body, self.amount_pattern)
        if amount > 0:
            try:
                await self.budget_service.update_budget(team.id, amount)
            except TeamBoardError:
                _logger.exception(
                    "Failed to add %s to budget of team %s", amount, team.id
                )
        return sent

    def _reconcile(self, pending: Message, status: DeliveryStatus) -> Message:
        updated = replace(pending, status=status)
        messages = self.state.chat.messages
        for index, message in enumerate(messages):
            if message.id == pending.id:
                messages[index] = updated
                break
        return updated
