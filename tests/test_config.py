"""Tests for settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from team_board.config import Settings, parse_currency_markers


def test_settings_defaults(settings: Settings) -> None:
    assert settings.store_backend == "apps_script"
    assert settings.budget_backend == "local"
    assert settings.slideshow_interval_seconds == 3.0
    assert settings.transcription_model == "whisper-1"


def test_settings_read_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("STORE_URL", "https://script.example.com/exec")
    monkeypatch.setenv("SLIDESHOW_INTERVAL_SECONDS", "1.5")
    monkeypatch.setenv("STATE_FILE", str(tmp_path / "board.json"))

    settings = Settings()

    assert settings.store_url == "https://script.example.com/exec"
    assert settings.slideshow_interval_seconds == 1.5
    assert settings.state_file == tmp_path / "board.json"


@pytest.mark.parametrize(
    "overrides",
    [
        {"store_url": None},
        {"store_backend": "supabase", "supabase_url": "https://x.supabase.co"},
        {"store_url": "https://s.example.com", "slideshow_interval_seconds": 0},
    ],
)
def test_settings_reject_incomplete_store(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("", None),
        (" , ", None),
        ("USD, usd ,€", ("usd", "€")),
    ],
)
def test_parse_currency_markers(
    raw: str | None, expected: tuple[str, ...] | None
) -> None:
    assert parse_currency_markers(raw) == expected
