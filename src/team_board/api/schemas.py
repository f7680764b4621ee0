"""Pydantic models for HTTP request bodies."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Login form."""

    email: str
    password: str


class CreateTeamRequest(BaseModel):
    """Team creation form."""

    name: str
    description: str = ""


class AdvanceRequest(BaseModel):
    """Slideshow step."""

    direction: int


class SendMessageRequest(BaseModel):
    """Chat input."""

    text: str
