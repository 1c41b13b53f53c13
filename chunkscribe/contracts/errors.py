from __future__ import annotations

from typing import Sequence


class PipelineError(Exception):
    """Raised by the pipeline entrypoint for user-facing failures."""


class ComponentError(Exception):
    """Base exception for component-level failures."""


class InputValidationError(ComponentError):
    """Raised when an input path, chunk batch or argument is invalid."""


class ConfigError(ComponentError):
    """Raised when settings cannot be read or an API key is missing."""


class FfmpegError(ComponentError):
    """Raised when ffmpeg/ffprobe operations fail."""


class ClipboardError(ComponentError):
    """Raised when the transcript cannot be copied to the clipboard."""


class TranscriptionError(ComponentError):
    """Raised when transcription provider calls fail."""


class TransportError(TranscriptionError):
    """Raised when the provider cannot be reached (connection, timeout)."""


class ProviderError(TranscriptionError):
    """Raised when the provider answers with a non-success HTTP status."""

    def __init__(self, status: int, body: str, *, provider: str | None = None) -> None:
        self.status = status
        self.body = body
        self.provider = provider
        label = f"{provider} API error" if provider else "provider API error"
        super().__init__(f"{label} ({status}): {body}")


class DecodeError(TranscriptionError):
    """Raised when a success response is not the expected JSON shape."""


class WorkerFault(TranscriptionError):
    """Raised when a unit of work terminates abnormally outside the provider call."""


class AggregateError(TranscriptionError):
    """Raised when one or more chunks of a batch failed to transcribe."""

    def __init__(self, failed_count: int, total_count: int, causes: Sequence[BaseException]) -> None:
        self.failed_count = failed_count
        self.total_count = total_count
        self.causes = list(causes)
        lines = [f"Failed to transcribe {failed_count} of {total_count} chunks:"]
        lines.extend(str(cause) for cause in self.causes)
        super().__init__("\n".join(lines))
