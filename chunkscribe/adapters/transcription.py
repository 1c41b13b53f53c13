from __future__ import annotations

from typing import Protocol


class TranscriptionAdapter(Protocol):
    """Provider adapter boundary: one encoded audio payload in, plain text out."""

    def transcribe(self, payload: bytes, *, filename: str = "audio.mp3") -> str:
        """Return the provider's transcript text or raise a TranscriptionError."""


__all__ = ["TranscriptionAdapter"]
