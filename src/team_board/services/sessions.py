"""Login state persisted across restarts."""

import logging
from dataclasses import dataclass

import pydantic
from pydantic import BaseModel, Field

from team_board.adapters.local_state import StateStorage
from team_board.adapters.store_client import StoreClient
from team_board.domain.errors import (
    ApplicationError,
    AuthError,
    AuthFailure,
    TransportError,
    ValidationError,
)
from team_board.domain.models import Session, User
from team_board.domain.state import AppState
from team_board.services.busy import BusyTracker

SESSION_KEY = "currentUser"

_logger = logging.getLogger(__name__)


class PersistedSession(BaseModel):
    """Session record as written to local state."""

    email: str = Field(min_length=1)


@dataclass
class SessionManager:
    """Owns the current user's identity."""

    store: StoreClient
    storage: StateStorage
    state: AppState
    busy: BusyTracker

    def restore(self) -> Session:
        """Load the persisted session; anything malformed means logged out."""
        raw = self.storage.get(SESSION_KEY)
        session = Session()
        if raw is not None:
            try:
                record = PersistedSession.model_validate(raw)
            except pydantic.ValidationError:
                _logger.warning("Ignoring malformed persisted session")
            else:
                session = Session(user=User(email=record.email))
        self.state.session = session
        return session

    async def login(self, email: str, password: str) -> Session:
        """Check credentials with the store and persist the session."""
        email = email.strip()
        if not email or not password:
            raise ValidationError("Email and password are required")
        try:
            async with self.busy.track():
                valid = await self.store.authenticate(email, password)
        except TransportError as exc:
            _logger.warning("Login for %s failed: %s", email, exc)
            raise AuthError(AuthFailure.UNREACHABLE) from exc
        except ApplicationError as exc:
            _logger.info("Login for %s rejected: %s", email, exc)
            raise AuthError(AuthFailure.INVALID_CREDENTIALS) from exc
        if not valid:
            raise AuthError(AuthFailure.INVALID_CREDENTIALS)

        self.storage.set(SESSION_KEY, PersistedSession(email=email).model_dump())
        session = Session(user=User(email=email))
        self.state.session = session
        _logger.info("Logged in as %s", email)
        return session

    def logout(self) -> None:
        """Forget the session in memory and on disk."""
        self.storage.remove(SESSION_KEY)
        self.state.session = Session()
