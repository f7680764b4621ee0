"""Voice input for the chat box."""

from dataclasses import dataclass
from typing import Protocol

from team_board.domain.errors import ValidationError
from team_board.domain.state import AppState


class Transcriber(Protocol):
    """Interface for speech-to-text engines."""

    async def transcribe(self, audio: bytes, filename: str) -> str:
        """Return the text spoken in an audio clip."""


@dataclass
class VoiceInput:
    """Turns recorded speech into the chat draft."""

    state: AppState
    transcriber: Transcriber | None = None

    @property
    def available(self) -> bool:
        """Return whether speech recognition is configured."""
        return self.transcriber is not None

    def toggle(self) -> bool:
        """Start or stop recording and return the new recording state."""
        self._require_available()
        chat = self.state.chat
        chat.recording = not chat.recording
        return chat.recording

    async def submit(self, audio: bytes, filename: str = "speech.webm") -> str:
        """Transcribe a recording into the chat draft."""
        transcriber = self._require_available()
        if not audio:
            self.state.chat.recording = False
            raise ValidationError("Empty recording")
        try:
            transcript = (await transcriber.transcribe(audio, filename)).strip()
        finally:
            self.state.chat.recording = False
        self.state.chat.draft = transcript
        return transcript

    def _require_available(self) -> Transcriber:
        if self.transcriber is None:
            raise ValidationError("Speech recognition is not available")
        return self.transcriber
