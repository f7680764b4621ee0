"""Tests for voice input."""

import asyncio

import pytest

from team_board.adapters.openai_transcriber import OpenAITranscriber
from team_board.domain.errors import TransportError, ValidationError
from team_board.domain.state import AppState
from team_board.services.voice import VoiceInput
from tests.conftest import FakeTranscriber


def test_submit_fills_draft_and_stops_recording() -> None:
    transcriber = FakeTranscriber(text="  dinner 30 dollars ")
    voice = VoiceInput(state=AppState(), transcriber=transcriber)

    assert voice.toggle() is True
    draft = asyncio.run(voice.submit(b"audio", "clip.ogg"))

    assert draft == "dinner 30 dollars"
    assert voice.state.chat.draft == draft
    assert voice.state.chat.recording is False
    assert transcriber.clips == [(b"audio", "clip.ogg")]


def test_failed_transcription_keeps_draft() -> None:
    transcriber = FakeTranscriber(error=TransportError("offline"))
    voice = VoiceInput(state=AppState(), transcriber=transcriber)
    voice.state.chat.draft = "typed"
    voice.toggle()

    with pytest.raises(TransportError):
        asyncio.run(voice.submit(b"audio"))

    assert voice.state.chat.draft == "typed"
    assert voice.state.chat.recording is False


def test_empty_recording_is_rejected() -> None:
    transcriber = FakeTranscriber()
    voice = VoiceInput(state=AppState(), transcriber=transcriber)

    with pytest.raises(ValidationError):
        asyncio.run(voice.submit(b""))

    assert transcriber.clips == []


def test_unavailable_voice_input() -> None:
    voice = VoiceInput(state=AppState())

    assert voice.available is False
    with pytest.raises(ValidationError):
        voice.toggle()
    with pytest.raises(ValidationError):
        asyncio.run(voice.submit(b"audio"))


class _FakeTranscriptions:
    def __init__(self) -> None:
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"text": "hola equipo"})()


class _FakeOpenAI:
    def __init__(self) -> None:
        self.audio = type("Audio", (), {})()
        self.audio.transcriptions = _FakeTranscriptions()


def test_openai_transcriber_sends_clip() -> None:
    client = _FakeOpenAI()
    transcriber = OpenAITranscriber(client=client, language="es")

    text = asyncio.run(transcriber.transcribe(b"audio", "speech.webm"))

    assert text == "hola equipo"
    assert client.audio.transcriptions.last_payload == {
        "model": "whisper-1",
        "file": ("speech.webm", b"audio"),
        "language": "es",
    }


def test_openai_transcriber_without_language() -> None:
    client = _FakeOpenAI()
    transcriber = OpenAITranscriber(client=client, language=None)

    asyncio.run(transcriber.transcribe(b"audio", "speech.webm"))

    assert "language" not in client.audio.transcriptions.last_payload
