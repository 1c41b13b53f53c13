from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import InputValidationError


class Provider(str, Enum):
    OPENAI = "openai"
    MISTRAL = "mistral"

    @classmethod
    def parse(cls, value: str | Provider) -> Provider:
        if isinstance(value, Provider):
            return value
        normalized = str(value).strip().lower()
        for provider in cls:
            if provider.value == normalized:
                return provider
        raise InputValidationError(f"Unknown provider: {value}. Use 'openai' or 'mistral'")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Chunk:
    index: int
    payload: bytes
    has_leading_overlap: bool = False

    def __post_init__(self) -> None:
        if self.index < 0:
            raise InputValidationError(f"chunk index must be >= 0, got {self.index}")

    @property
    def filename(self) -> str:
        return f"audio_chunk_{self.index}.mp3"


@dataclass(frozen=True, slots=True)
class ChunkOutcome:
    index: int
    text: str | None = None
    has_leading_overlap: bool = False
    cause: BaseException | None = None

    @classmethod
    def success(cls, index: int, text: str, *, has_leading_overlap: bool = False) -> ChunkOutcome:
        return cls(index=index, text=text, has_leading_overlap=has_leading_overlap)

    @classmethod
    def failure(cls, index: int, cause: BaseException) -> ChunkOutcome:
        return cls(index=index, cause=cause)

    @property
    def ok(self) -> bool:
        return self.cause is None


@dataclass(frozen=True, slots=True)
class TranscriptionRequest:
    """Per-invocation provider configuration, read-only during dispatch."""

    provider: Provider
    api_key: str
    language_hint: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "provider", Provider.parse(self.provider))
        if not self.api_key or not self.api_key.strip():
            raise InputValidationError("api_key is required")
        if self.language_hint is not None:
            hint = self.language_hint.strip().lower()
            if len(hint) != 2 or not hint.isalpha():
                raise InputValidationError(
                    f"language hint must be a 2-letter code (e.g. en), got {self.language_hint!r}"
                )
            object.__setattr__(self, "language_hint", hint)

    def __repr__(self) -> str:
        return (
            f"TranscriptionRequest(provider={self.provider.value!r}, api_key='***', "
            f"language_hint={self.language_hint!r})"
        )


@dataclass(frozen=True, slots=True)
class Transcript:
    text: str
    provider: str
    model: str
    chunk_count: int
