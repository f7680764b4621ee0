"""Error taxonomy shared by services and adapters."""

from enum import StrEnum


class TeamBoardError(Exception):
    """Base class for team board errors."""


class TransportError(TeamBoardError):
    """The record store could not be reached or answered garbage."""


class ApplicationError(TeamBoardError):
    """The record store rejected the request."""


class ValidationError(TeamBoardError):
    """Input was rejected before any request was sent."""


class NavigationError(TeamBoardError):
    """A screen transition is not valid from the current screen."""


class AuthFailure(StrEnum):
    """Reasons a login attempt can fail."""

    INVALID_CREDENTIALS = "invalid_credentials"
    UNREACHABLE = "unreachable"


class AuthError(TeamBoardError):
    """Login failed."""

    def __init__(self, reason: AuthFailure) -> None:
        super().__init__(reason.value)
        self.reason = reason
