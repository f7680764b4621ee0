"""Record store client for the spreadsheet web app."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

import httpx
import pydantic

from team_board.adapters.store_models import (
    MessagePayload,
    PhotoPayload,
    StorePayload,
    TeamPayload,
    parse_total,
)
from team_board.domain.errors import ApplicationError, TransportError
from team_board.domain.models import Message, Photo, Team


class StoreClient(Protocol):
    """Interface for the remote record store."""

    async def authenticate(self, email: str, password: str) -> bool:
        """Return whether the credentials match a stored user."""

    async def list_teams(self, owner_email: str) -> list[Team]:
        """Return the teams owned by a user."""

    async def create_team(self, owner_email: str, name: str, description: str) -> Team:
        """Create a team and return it with its store-assigned id."""

    async def list_photos(self, team_id: str) -> list[Photo]:
        """Return the photos of a team."""

    async def upload_photo(
        self, team_id: str, image_data: str, uploaded_at: datetime
    ) -> None:
        """Store a photo for a team."""

    async def delete_photo(self, photo_id: str) -> None:
        """Delete a photo."""

    async def list_messages(self, team_id: str) -> list[Message]:
        """Return the chat messages of a team."""

    async def save_message(
        self, team_id: str, sender_email: str, text: str, timestamp: datetime
    ) -> None:
        """Store a chat message."""

    async def get_budget(self, team_id: str) -> Decimal:
        """Return the budget total of a team."""

    async def increment_budget(self, team_id: str, amount: Decimal) -> Decimal:
        """Atomically add to a team budget and return the new total."""


@dataclass
class HttpxStoreClient(StoreClient):
    """Store client speaking the spreadsheet web app protocol over httpx.

    Reads are ``GET ?action=<name>&...``; writes are ``POST`` of a JSON body
    carrying the action name. An ``error`` key in a response is a rejection.
    """

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 15.0) -> "HttpxStoreClient":
        """Create a store client with a managed httpx session."""
        # The web app answers writes with a redirect to the script output.
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout=timeout,
        )

    async def authenticate(self, email: str, password: str) -> bool:
        """Check credentials via the login action."""
        payload = await self._get("login", email=email, password=password)
        return bool(payload.get("success"))

    async def list_teams(self, owner_email: str) -> list[Team]:
        """Fetch teams owned by a user."""
        payload = await self._get("getTeams", email=owner_email)
        return [row.to_domain() for row in _parse_rows(TeamPayload, payload, "teams")]

    async def create_team(self, owner_email: str, name: str, description: str) -> Team:
        """Create a team via the addTeam action."""
        payload = await self._post(
            "addTeam",
            {"userEmail": owner_email, "name": name, "description": description},
        )
        raw_team = payload.get("team")
        if not isinstance(raw_team, dict) or not raw_team.get("id"):
            raise ApplicationError("Store returned a team without an id")
        try:
            team = TeamPayload.model_validate(raw_team)
        except pydantic.ValidationError as exc:
            raise ApplicationError(f"Malformed team payload: {exc}") from exc
        return team.to_domain()

    async def list_photos(self, team_id: str) -> list[Photo]:
        """Fetch photos for a team."""
        payload = await self._get("getPhotos", teamId=team_id)
        return [
            row.to_domain() for row in _parse_rows(PhotoPayload, payload, "photos")
        ]

    async def upload_photo(
        self, team_id: str, image_data: str, uploaded_at: datetime
    ) -> None:
        """Upload an embedded image payload."""
        await self._post(
            "uploadPhoto",
            {
                "teamId": team_id,
                "imageData": image_data,
                "uploadDate": uploaded_at.isoformat(),
            },
        )

    async def delete_photo(self, photo_id: str) -> None:
        """Delete a photo by id."""
        await self._post("deletePhoto", {"photoId": photo_id})

    async def list_messages(self, team_id: str) -> list[Message]:
        """Fetch chat messages for a team."""
        payload = await self._get("getMessages", teamId=team_id)
        return [
            row.to_domain()
            for row in _parse_rows(MessagePayload, payload, "messages")
        ]

    async def save_message(
        self, team_id: str, sender_email: str, text: str, timestamp: datetime
    ) -> None:
        """Persist a chat message."""
        await self._post(
            "saveMessage",
            {
                "teamId": team_id,
                "userEmail": sender_email,
                "message": text,
                "timestamp": timestamp.isoformat(),
            },
        )

    async def get_budget(self, team_id: str) -> Decimal:
        """Read the budget total for a team."""
        payload = await self._get("getBudget", teamId=team_id)
        return _budget_total(payload)

    async def increment_budget(self, team_id: str, amount: Decimal) -> Decimal:
        """Add to the budget total on the store side."""
        payload = await self._post(
            "incrementBudget", {"teamId": team_id, "amount": str(amount)}
        )
        return _budget_total(payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(self, action: str, **params: str) -> dict[str, object]:
        try:
            response = await self.http_client.get(
                self.base_url,
                params={"action": action, **params},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TransportError(f"{action} failed: {exc}") from exc
        return _checked(action, payload)

    async def _post(self, action: str, body: dict[str, object]) -> dict[str, object]:
        try:
            response = await self.http_client.post(
                self.base_url,
                json={"action": action, **body},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TransportError(f"{action} failed: {exc}") from exc
        return _checked(action, payload)


def _checked(action: str, payload: object) -> dict[str, object]:
    if not isinstance(payload, dict):
        raise TransportError(f"{action} returned a non-object response")
    error = payload.get("error")
    if error:
        raise ApplicationError(str(error))
    return payload


def _parse_rows(
    model: type[StorePayload], payload: dict[str, object], key: str
) -> list:
    rows = payload.get(key) or []
    if not isinstance(rows, list):
        raise ApplicationError(f"Malformed {key} payload")
    try:
        return [model.model_validate(row) for row in rows]
    except pydantic.ValidationError as exc:
        raise ApplicationError(f"Malformed {key} payload: {exc}") from exc


def _budget_total(payload: dict[str, object]) -> Decimal:
    total = parse_total(payload.get("total"))
    if total is None:
        raise ApplicationError("Malformed budget payload")
    return total
