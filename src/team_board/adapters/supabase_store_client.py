"""Supabase-backed record store."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx
import pydantic
from postgrest.exceptions import APIError
from supabase import Client

from team_board.adapters.store_client import StoreClient
from team_board.adapters.store_models import (
    MessagePayload,
    PhotoPayload,
    StorePayload,
    TeamPayload,
    parse_total,
)
from team_board.domain.errors import ApplicationError, TransportError
from team_board.domain.models import Message, Photo, Team


@dataclass
class SupabaseStoreClient(StoreClient):
    """Supabase implementation of the record store.

    The Supabase client is synchronous, so every query runs in a worker thread
    to keep the event loop responsive.
    """

    client: Client

    async def authenticate(self, email: str, password: str) -> bool:
        """Match credentials against the users table."""
        response = await self._run(
            "login",
            lambda: self.client.table("users")
            .select("email")
            .eq("email", email)
            .eq("password", password)
            .limit(1)
            .execute(),
        )
        return bool(response.data)

    async def list_teams(self, owner_email: str) -> list[Team]:
        """Return teams owned by a user, oldest first."""
        response = await self._run(
            "getTeams",
            lambda: self.client.table("teams")
            .select("id, name, description, owner_email")
            .eq("owner_email", owner_email)
            .order("created_at")
            .execute(),
        )
        return [_parse(TeamPayload, row).to_domain() for row in response.data or []]

    async def create_team(self, owner_email: str, name: str, description: str) -> Team:
        """Insert a team row and return it."""
        response = await self._run(
            "addTeam",
            lambda: self.client.table("teams")
            .insert(
                {"owner_email": owner_email, "name": name, "description": description}
            )
            .execute(),
        )
        if not response.data or not response.data[0].get("id"):
            raise ApplicationError("Store returned a team without an id")
        return _parse(TeamPayload, response.data[0]).to_domain()

    async def list_photos(self, team_id: str) -> list[Photo]:
        """Return photos for a team in upload order."""
        response = await self._run(
            "getPhotos",
            lambda: self.client.table("photos")
            .select("id, team_id, image_data, uploaded_at")
            .eq("team_id", team_id)
            .order("uploaded_at")
            .execute(),
        )
        return [_parse(PhotoPayload, row).to_domain() for row in response.data or []]

    async def upload_photo(
        self, team_id: str, image_data: str, uploaded_at: datetime
    ) -> None:
        """Insert a photo row."""
        await self._run(
            "uploadPhoto",
            lambda: self.client.table("photos")
            .insert(
                {
                    "team_id": team_id,
                    "image_data": image_data,
                    "uploaded_at": uploaded_at.isoformat(),
                }
            )
            .execute(),
        )

    async def delete_photo(self, photo_id: str) -> None:
        """Delete a photo row."""
        await self._run(
            "deletePhoto",
            lambda: self.client.table("photos").delete().eq("id", photo_id).execute(),
        )

    async def list_messages(self, team_id: str) -> list[Message]:
        """Return messages for a team in send order."""
        response = await self._run(
            "getMessages",
            lambda: self.client.table("messages")
            .select("id, team_id, sender_email, body, created_at")
            .eq("team_id", team_id)
            .order("created_at")
            .execute(),
        )
        return [
            _parse(MessagePayload, row).to_domain() for row in response.data or []
        ]

    async def save_message(
        self, team_id: str, sender_email: str, text: str, timestamp: datetime
    ) -> None:
        """Insert a message row."""
        await self._run(
            "saveMessage",
            lambda: self.client.table("messages")
            .insert(
                {
                    "team_id": team_id,
                    "sender_email": sender_email,
                    "body": text,
                    "created_at": timestamp.isoformat(),
                }
            )
            .execute(),
        )

    async def get_budget(self, team_id: str) -> Decimal:
        """Read the budget row for a team, defaulting to zero."""
        response = await self._run(
            "getBudget",
            lambda: self.client.table("team_budgets")
            .select("total")
            .eq("team_id", team_id)
            .limit(1)
            .execute(),
        )
        if not response.data:
            return Decimal(0)
        return _total(response.data[0].get("total"))

    async def increment_budget(self, team_id: str, amount: Decimal) -> Decimal:
        """Increment the budget in a single database call."""
        response = await self._run(
            "incrementBudget",
            lambda: self.client.rpc(
                "increment_team_budget",
                {"p_team_id": team_id, "p_amount": str(amount)},
            ).execute(),
        )
        data = response.data
        if isinstance(data, list):
            data = data[0].get("total") if data else None
        return _total(data)

    async def _run(self, action: str, query: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(query)
        except APIError as exc:
            raise ApplicationError(f"{action} rejected: {exc.message}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{action} failed: {exc}") from exc


def _parse(model: type[StorePayload], row: dict[str, object]) -> StorePayload:
    try:
        return model.model_validate(row)
    except pydantic.ValidationError as exc:
        raise ApplicationError(f"Malformed {model.__name__}: {exc}") from exc


def _total(raw: object) -> Decimal:
    total = parse_total(raw)
    if total is None:
        raise ApplicationError("Malformed budget total")
    return total
