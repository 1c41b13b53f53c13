from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

from chunkscribe.adapters.ffmpeg import FfmpegAdapter
from chunkscribe.contracts.artifacts import Chunk
from chunkscribe.contracts.errors import FfmpegError, InputValidationError


logger = logging.getLogger(__name__)

# Providers cap uploads at 25 MB.
DEFAULT_THRESHOLD_BYTES = 20 * 1024 * 1024
DEFAULT_CHUNK_SECONDS = 300
DEFAULT_OVERLAP_SECONDS = 2.0


@dataclass(frozen=True, slots=True)
class ChunkWindow:
    index: int
    start_s: float
    duration_s: float
    has_leading_overlap: bool


@dataclass(frozen=True, slots=True)
class Recording:
    """An encoded recording, either one payload or an ordered list of chunks."""

    payload: bytes | None = None
    chunks: list[Chunk] = field(default_factory=list)

    @property
    def is_chunked(self) -> bool:
        return self.payload is None


def plan_chunk_windows(
    duration_s: float,
    chunk_seconds: float = DEFAULT_CHUNK_SECONDS,
    overlap_seconds: float = DEFAULT_OVERLAP_SECONDS,
) -> list[ChunkWindow]:
    """
    Split [0, duration_s) into consecutive windows of chunk_seconds.
    Every window after the first starts overlap_seconds early so that words cut
    at a boundary appear whole in at least one chunk.
    """
    if chunk_seconds <= 0:
        raise InputValidationError("chunk_seconds must be > 0")
    if overlap_seconds < 0 or overlap_seconds >= chunk_seconds:
        raise InputValidationError("overlap_seconds must be >= 0 and < chunk_seconds")
    if duration_s <= 0:
        raise InputValidationError("duration_s must be > 0")

    count = math.ceil(duration_s / chunk_seconds)
    windows: list[ChunkWindow] = []
    for index in range(count):
        nominal_start = index * chunk_seconds
        end = min(duration_s, nominal_start + chunk_seconds)
        overlap = overlap_seconds if index > 0 else 0.0
        start = max(0.0, nominal_start - overlap)
        windows.append(
            ChunkWindow(
                index=index,
                start_s=start,
                duration_s=end - start,
                has_leading_overlap=index > 0 and overlap > 0,
            )
        )
    return windows


def _validate_input_audio(input_path: Path) -> None:
    if not input_path.exists():
        raise InputValidationError(f"input audio not found: {input_path}")
    if not input_path.is_file():
        raise InputValidationError(f"input audio is not a file: {input_path}")


def _prepare_work_dir(work_dir: Path) -> Path:
    work_dir = Path(work_dir)
    if work_dir.exists() and any(work_dir.iterdir()):
        raise InputValidationError(f"work directory must be empty: {work_dir}")
    work_dir.mkdir(parents=True, exist_ok=True)
    return work_dir


def _read_output(path: Path) -> bytes:
    if not path.is_file():
        raise FfmpegError(f"ffmpeg did not produce {path}")
    data = path.read_bytes()
    if not data:
        raise FfmpegError(f"ffmpeg produced an empty file: {path}")
    return data


def prepare_recording(
    input_path: Path,
    work_dir: Path,
    ffmpeg: FfmpegAdapter,
    *,
    threshold_bytes: int = DEFAULT_THRESHOLD_BYTES,
    chunk_seconds: float = DEFAULT_CHUNK_SECONDS,
    overlap_seconds: float = DEFAULT_OVERLAP_SECONDS,
) -> Recording:
    """Encode the input to MP3 and split it into overlapping chunks when it exceeds threshold_bytes."""
    input_path = Path(input_path)
    _validate_input_audio(input_path)
    if threshold_bytes <= 0:
        raise InputValidationError("threshold_bytes must be > 0")
    work_dir = _prepare_work_dir(work_dir)

    encoded_path = work_dir / "recording.mp3"
    ffmpeg.encode_mp3(input_path, encoded_path)
    encoded = _read_output(encoded_path)
    if len(encoded) <= threshold_bytes:
        logger.info("recording is %d bytes; sending as a single upload", len(encoded))
        return Recording(payload=encoded)

    duration_s = ffmpeg.probe_duration_s(encoded_path)
    windows = plan_chunk_windows(duration_s, chunk_seconds, overlap_seconds)
    logger.info(
        "recording is %d bytes / %.1fs; splitting into %d chunks",
        len(encoded),
        duration_s,
        len(windows),
    )

    chunks: list[Chunk] = []
    for window in windows:
        chunk_path = work_dir / f"chunk_{window.index:04d}.mp3"
        ffmpeg.extract_window(encoded_path, chunk_path, window.start_s, window.duration_s)
        chunks.append(
            Chunk(
                index=window.index,
                payload=_read_output(chunk_path),
                has_leading_overlap=window.has_leading_overlap,
            )
        )
    return Recording(chunks=chunks)


__all__ = [
    "DEFAULT_CHUNK_SECONDS",
    "DEFAULT_OVERLAP_SECONDS",
    "DEFAULT_THRESHOLD_BYTES",
    "ChunkWindow",
    "Recording",
    "plan_chunk_windows",
    "prepare_recording",
]
