from __future__ import annotations

from .clipboard import Clipboard, CommandClipboard, resolve_clipboard_command
from .ffmpeg import (
    FfmpegAdapter,
    SubprocessFfmpeg,
    build_ffmpeg_extract_cmd,
    build_ffmpeg_mp3_cmd,
    build_ffprobe_duration_cmd,
)
from .openai_transcription import OpenAIClientLike, OpenAICompatibleAdapter, build_adapter, build_client
from .providers import PROVIDER_SPECS, ProviderSpec, provider_spec
from .transcription import TranscriptionAdapter

__all__ = [
    "Clipboard",
    "CommandClipboard",
    "resolve_clipboard_command",
    "FfmpegAdapter",
    "SubprocessFfmpeg",
    "build_ffmpeg_mp3_cmd",
    "build_ffmpeg_extract_cmd",
    "build_ffprobe_duration_cmd",
    "OpenAIClientLike",
    "OpenAICompatibleAdapter",
    "build_adapter",
    "build_client",
    "PROVIDER_SPECS",
    "ProviderSpec",
    "provider_spec",
    "TranscriptionAdapter",
]
