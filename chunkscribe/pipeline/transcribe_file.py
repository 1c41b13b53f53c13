from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from chunkscribe.adapters.clipboard import Clipboard
from chunkscribe.adapters.ffmpeg import FfmpegAdapter
from chunkscribe.adapters.openai_transcription import OpenAIClientLike
from chunkscribe.adapters.providers import provider_spec
from chunkscribe.components.chunking import (
    DEFAULT_CHUNK_SECONDS,
    DEFAULT_OVERLAP_SECONDS,
    DEFAULT_THRESHOLD_BYTES,
    Recording,
    prepare_recording,
)
from chunkscribe.components.dispatch import MAX_CONCURRENT_REQUESTS, ProgressCallback
from chunkscribe.components.transcription import transcribe_many, transcribe_one
from chunkscribe.contracts.artifacts import Transcript, TranscriptionRequest
from chunkscribe.contracts.errors import InputValidationError, PipelineError
from chunkscribe.pipeline.io import write_transcript


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    request: TranscriptionRequest
    ffmpeg: FfmpegAdapter
    max_concurrency: int = MAX_CONCURRENT_REQUESTS
    threshold_bytes: int = DEFAULT_THRESHOLD_BYTES
    chunk_seconds: float = DEFAULT_CHUNK_SECONDS
    overlap_seconds: float = DEFAULT_OVERLAP_SECONDS
    output_path: Path | None = None
    clipboard: Clipboard | None = None
    work_dir: Path | None = None
    on_progress: ProgressCallback | None = None
    client: OpenAIClientLike | None = None


def _fail(step: str, exc: Exception) -> NoReturn:
    logger.debug("step %s failed: %s: %s", step, type(exc).__name__, exc)
    if isinstance(exc, PipelineError):
        raise exc
    raise PipelineError(f"{step} failed: {exc}") from exc


def _prepare(input_path: Path, work_dir: Path, config: PipelineConfig) -> Recording:
    return prepare_recording(
        input_path,
        work_dir,
        config.ffmpeg,
        threshold_bytes=config.threshold_bytes,
        chunk_seconds=config.chunk_seconds,
        overlap_seconds=config.overlap_seconds,
    )


def _transcribe(recording: Recording, config: PipelineConfig) -> str:
    if recording.is_chunked:
        return transcribe_many(
            config.request,
            recording.chunks,
            max_concurrency=config.max_concurrency,
            on_progress=config.on_progress,
            client=config.client,
        )
    assert recording.payload is not None
    return transcribe_one(config.request, recording.payload, client=config.client)


def run(input_path: Path, config: PipelineConfig) -> Transcript:
    """Transcribe one audio file and deliver the text to the configured sinks."""
    input_path = Path(input_path)
    spec = provider_spec(config.request.provider)

    # 1. validate
    try:
        if not input_path.exists():
            raise InputValidationError(f"input not found: {input_path}")
        if not input_path.is_file():
            raise InputValidationError(f"input is not a file: {input_path}")
    except Exception as exc:
        _fail("validate", exc)

    # 2. prepare + 3. transcribe; chunk files only live for the duration of the call
    with tempfile.TemporaryDirectory(prefix="chunkscribe-") as tmp:
        work_dir = Path(config.work_dir) if config.work_dir is not None else Path(tmp) / "work"
        try:
            recording = _prepare(input_path, work_dir, config)
        except Exception as exc:
            _fail("prepare", exc)

        try:
            text = _transcribe(recording, config)
        except Exception as exc:
            _fail("transcribe", exc)

    transcript = Transcript(
        text=text,
        provider=spec.provider.value,
        model=spec.model,
        chunk_count=len(recording.chunks) if recording.is_chunked else 1,
    )

    # 4. deliver
    try:
        if config.output_path is not None:
            write_transcript(Path(config.output_path), transcript.text)
            logger.info("transcript written to %s", config.output_path)
        if config.clipboard is not None:
            config.clipboard.copy(transcript.text)
            logger.info("transcript copied to clipboard")
    except Exception as exc:
        _fail("deliver", exc)

    return transcript


__all__ = ["PipelineConfig", "run"]
