from .artifacts import Chunk, ChunkOutcome, Provider, Transcript, TranscriptionRequest
from .errors import (
    AggregateError,
    ClipboardError,
    ComponentError,
    ConfigError,
    DecodeError,
    FfmpegError,
    InputValidationError,
    PipelineError,
    ProviderError,
    TranscriptionError,
    TransportError,
    WorkerFault,
)

__all__ = [
    "Chunk",
    "ChunkOutcome",
    "Provider",
    "Transcript",
    "TranscriptionRequest",
    "PipelineError",
    "ComponentError",
    "InputValidationError",
    "ConfigError",
    "FfmpegError",
    "ClipboardError",
    "TranscriptionError",
    "TransportError",
    "ProviderError",
    "DecodeError",
    "WorkerFault",
    "AggregateError",
]
