"""OpenAI speech-to-text client for voice input."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from team_board.domain.errors import TransportError
from team_board.services.voice import Transcriber


@dataclass
class OpenAITranscriber(Transcriber):
    """Transcriber backed by the OpenAI audio transcription API."""

    client: AsyncOpenAI
    model: str = "whisper-1"
    language: str | None = "es"

    @classmethod
    def create(
        cls, api_key: str, model: str = "whisper-1", language: str | None = "es"
    ) -> "OpenAITranscriber":
        """Create a transcriber with its own OpenAI client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model, language=language)

    async def transcribe(self, audio: bytes, filename: str) -> str:
        """Send the clip to OpenAI and return the recognised text."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "file": (filename, audio),
        }
        if self.language:
            request_payload["language"] = self.language
        try:
            response = await self.client.audio.transcriptions.create(**request_payload)
        except openai.APIError as exc:
            raise TransportError(f"Transcription failed: {exc}") from exc
        return response.text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
