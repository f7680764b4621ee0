"""Domain models for the team board."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum


@dataclass(frozen=True)
class User:
    """Represents a user known to the record store."""

    email: str
    display_name: str | None = None


@dataclass(frozen=True)
class Team:
    """Represents a collaboration team."""

    id: str
    name: str
    description: str
    owner_email: str


@dataclass(frozen=True)
class Photo:
    """Represents a photo attached to a team."""

    id: str
    team_id: str
    image_data: str
    uploaded_at: datetime | None


class DeliveryStatus(StrEnum):
    """Delivery state of a chat message written by this client."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class Message:
    """Represents a chat message within a team."""

    id: str
    team_id: str
    sender_email: str
    text: str
    timestamp: datetime | None
    status: DeliveryStatus = DeliveryStatus.CONFIRMED


@dataclass(frozen=True)
class Budget:
    """Accumulated monetary total for a team."""

    team_id: str
    total: Decimal

    def display(self) -> str:
        """Return the total formatted for display."""
        return format_amount(self.total)


@dataclass(frozen=True)
class Session:
    """Currently authenticated user, if any."""

    user: User | None = None

    @property
    def authenticated(self) -> bool:
        """Return whether a user is logged in."""
        return self.user is not None


def format_amount(amount: Decimal) -> str:
    """Format an amount as dollars with two decimals."""
    return f"${amount.quantize(Decimal('0.01'))}"
