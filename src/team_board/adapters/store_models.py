"""Pydantic models for record store payloads.

Both store backends are parsed through these models: the spreadsheet web app
answers with camelCase keys, Supabase rows use snake_case columns.
"""

from abc import abstractmethod
from datetime import datetime
from decimal import Decimal, InvalidOperation

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from team_board.domain.models import Message, Photo, Team


class StorePayload(BaseModel):
    """Base model tolerant of spreadsheet quirks."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    @abstractmethod
    def to_domain(self) -> object:
        """Convert the payload to its domain model."""


class TeamPayload(StorePayload):
    """Team row."""

    id: str = Field(min_length=1)
    name: str
    description: str | None = None
    owner_email: str = Field(
        default="", validation_alias=AliasChoices("userEmail", "owner_email")
    )

    def to_domain(self) -> Team:
        return Team(
            id=self.id,
            name=self.name,
            description=self.description or "",
            owner_email=self.owner_email,
        )


class PhotoPayload(StorePayload):
    """Photo row."""

    id: str
    team_id: str = Field(validation_alias=AliasChoices("teamId", "team_id"))
    image_data: str = Field(validation_alias=AliasChoices("imageData", "image_data"))
    uploaded_at: str | None = Field(
        default=None, validation_alias=AliasChoices("uploadDate", "uploaded_at")
    )

    def to_domain(self) -> Photo:
        return Photo(
            id=self.id,
            team_id=self.team_id,
            image_data=self.image_data,
            uploaded_at=parse_timestamp(self.uploaded_at),
        )


class MessagePayload(StorePayload):
    """Message row."""

    id: str = ""
    team_id: str = Field(validation_alias=AliasChoices("teamId", "team_id"))
    sender_email: str = Field(
        validation_alias=AliasChoices("userEmail", "sender_email")
    )
    text: str = Field(validation_alias=AliasChoices("message", "body"))
    timestamp: str | None = Field(
        default=None, validation_alias=AliasChoices("timestamp", "created_at")
    )

    def to_domain(self) -> Message:
        return Message(
            id=self.id,
            team_id=self.team_id,
            sender_email=self.sender_email,
            text=self.text,
            timestamp=parse_timestamp(self.timestamp),
        )


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp or date, returning None when unparseable."""
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def parse_total(raw: object) -> Decimal | None:
    """Parse a budget total, returning None when it is not a number."""
    if raw is None or raw == "":
        return Decimal(0)
    try:
        total = Decimal(str(raw))
    except InvalidOperation:
        return None
    return total if total.is_finite() else None
