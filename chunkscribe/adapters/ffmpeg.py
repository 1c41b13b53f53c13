from __future__ import annotations

import logging
import subprocess
from os import PathLike
from pathlib import Path
from typing import Protocol, Sequence, TypeAlias

from chunkscribe.contracts.errors import FfmpegError


logger = logging.getLogger(__name__)

StrPath: TypeAlias = str | PathLike[str]

DEFAULT_SAMPLE_RATE = 16000
DEFAULT_BITRATE = "64k"


def _path_str(value: StrPath) -> str:
    return str(Path(value))


def _require_positive_int(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be > 0")


def _seconds(value: float) -> str:
    return f"{value:.3f}"


def _mp3_output_args(sample_rate: int, bitrate: str) -> list[str]:
    return [
        "-vn",
        "-acodec",
        "libmp3lame",
        "-b:a",
        bitrate,
        "-ar",
        str(sample_rate),
        "-ac",
        "1",
    ]


def build_ffmpeg_mp3_cmd(
    input_path: StrPath,
    output_path: StrPath,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    bitrate: str = DEFAULT_BITRATE,
) -> list[str]:
    """Build an ffmpeg command that compresses any audio input to mono MP3."""
    _require_positive_int("sample_rate", sample_rate)
    return [
        "ffmpeg",
        "-y",
        "-i",
        _path_str(input_path),
        *_mp3_output_args(sample_rate, bitrate),
        _path_str(output_path),
    ]


def build_ffmpeg_extract_cmd(
    input_path: StrPath,
    output_path: StrPath,
    start_s: float,
    duration_s: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    bitrate: str = DEFAULT_BITRATE,
) -> list[str]:
    """Build an ffmpeg command that re-encodes one [start, start+duration) window to MP3."""
    _require_positive_int("sample_rate", sample_rate)
    if start_s < 0:
        raise ValueError("start_s must be >= 0")
    if duration_s <= 0:
        raise ValueError("duration_s must be > 0")
    return [
        "ffmpeg",
        "-y",
        "-ss",
        _seconds(start_s),
        "-t",
        _seconds(duration_s),
        "-i",
        _path_str(input_path),
        *_mp3_output_args(sample_rate, bitrate),
        _path_str(output_path),
    ]


def build_ffprobe_duration_cmd(input_path: StrPath) -> list[str]:
    return [
        "ffprobe",
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
        _path_str(input_path),
    ]


class FfmpegAdapter(Protocol):
    def encode_mp3(self, input_path: StrPath, output_path: StrPath) -> None:
        """Compress the input recording to a mono MP3 file."""

    def extract_window(self, input_path: StrPath, output_path: StrPath, start_s: float, duration_s: float) -> None:
        """Write one time window of the input as an MP3 file."""

    def probe_duration_s(self, input_path: StrPath) -> float:
        """Return the media duration in seconds."""


def _run_or_raise(cmd: Sequence[str], fallback_message: str) -> str:
    logger.debug("running: %s", " ".join(cmd))
    try:
        completed = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        raise FfmpegError(
            f"{cmd[0]} is not installed or not in PATH; install FFmpeg (https://ffmpeg.org/download.html)"
        ) from exc
    if completed.returncode == 0:
        return completed.stdout
    message = completed.stderr.strip() or completed.stdout.strip() or fallback_message
    raise FfmpegError(message)


class SubprocessFfmpeg:
    """FfmpegAdapter backed by the ffmpeg/ffprobe binaries on PATH."""

    def __init__(self, *, sample_rate: int = DEFAULT_SAMPLE_RATE, bitrate: str = DEFAULT_BITRATE) -> None:
        _require_positive_int("sample_rate", sample_rate)
        self._sample_rate = sample_rate
        self._bitrate = bitrate

    def encode_mp3(self, input_path: StrPath, output_path: StrPath) -> None:
        cmd = build_ffmpeg_mp3_cmd(input_path, output_path, self._sample_rate, self._bitrate)
        _run_or_raise(cmd, "ffmpeg encoding failed")

    def extract_window(self, input_path: StrPath, output_path: StrPath, start_s: float, duration_s: float) -> None:
        cmd = build_ffmpeg_extract_cmd(input_path, output_path, start_s, duration_s, self._sample_rate, self._bitrate)
        _run_or_raise(cmd, "ffmpeg chunk extraction failed")

    def probe_duration_s(self, input_path: StrPath) -> float:
        out = _run_or_raise(build_ffprobe_duration_cmd(input_path), "ffprobe failed").strip()
        try:
            return float(out)
        except ValueError as exc:
            raise FfmpegError(f"ffprobe returned an unreadable duration: {out!r}") from exc


__all__ = [
    "FfmpegAdapter",
    "SubprocessFfmpeg",
    "build_ffmpeg_extract_cmd",
    "build_ffmpeg_mp3_cmd",
    "build_ffprobe_duration_cmd",
]
