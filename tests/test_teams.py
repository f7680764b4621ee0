"""Tests for the team list."""

import asyncio

import pytest

from team_board.domain.errors import NavigationError, ValidationError
from team_board.domain.models import Session, Team, User
from team_board.domain.state import AppState
from team_board.services.busy import BusyTracker
from team_board.services.teams import TeamService
from tests.conftest import InMemoryStoreClient


def _service(store: InMemoryStoreClient, email: str | None = "ana@example.com"):
    session = Session(user=User(email=email)) if email else Session()
    return TeamService(store=store, state=AppState(session=session), busy=BusyTracker())


def test_load_teams_for_current_user() -> None:
    store = InMemoryStoreClient(
        teams=[
            Team(id="t1", name="Alpha", description="", owner_email="ana@example.com"),
            Team(id="t2", name="Beta", description="", owner_email="bo@example.com"),
        ]
    )
    service = _service(store)

    teams = asyncio.run(service.load_teams())

    assert [team.id for team in teams] == ["t1"]
    assert service.find("t1") is not None
    assert service.find("t2") is None


def test_load_teams_failure_degrades_to_empty() -> None:
    service = _service(InMemoryStoreClient(fail={"list_teams"}))

    assert asyncio.run(service.load_teams()) == []
    assert service.state.teams == []


def test_create_team_appends_to_list() -> None:
    store = InMemoryStoreClient()
    service = _service(store)

    team = asyncio.run(service.create_team("  Alpha ", " first "))

    assert team.name == "Alpha"
    assert team.description == "first"
    assert service.state.teams == [team]
    assert store.teams == [team]


def test_create_team_requires_name_and_login() -> None:
    store = InMemoryStoreClient()

    with pytest.raises(ValidationError):
        asyncio.run(_service(store).create_team("   "))
    with pytest.raises(NavigationError):
        asyncio.run(_service(store, email=None).create_team("Alpha"))

    assert store.calls == []
