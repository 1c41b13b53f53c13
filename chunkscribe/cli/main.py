from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence, TypeAlias

from chunkscribe.adapters.clipboard import CommandClipboard
from chunkscribe.adapters.ffmpeg import SubprocessFfmpeg
from chunkscribe.adapters.providers import provider_spec
from chunkscribe.components.chunking import DEFAULT_CHUNK_SECONDS, DEFAULT_OVERLAP_SECONDS
from chunkscribe.components.dispatch import ProgressCallback
from chunkscribe.config import Settings, mask_api_key, settings_path, validate_api_key
from chunkscribe.contracts.artifacts import Provider, Transcript, TranscriptionRequest
from chunkscribe.logging_setup import configure_logging
from chunkscribe.pipeline.transcribe_file import PipelineConfig, run as run_pipeline


logger = logging.getLogger(__name__)

Argv: TypeAlias = Sequence[str]

PROVIDER_CHOICES = [provider.value for provider in Provider]
DEFAULT_THRESHOLD_MB = 20


@dataclass(frozen=True, slots=True)
class CliRunResult:
    transcript: Transcript
    output_path: Path | None
    copied_to_clipboard: bool


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {value}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return parsed


def _nonnegative_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return parsed


def _language_code(value: str) -> str:
    code = value.strip().lower()
    if len(code) != 2 or not code.isalpha():
        raise argparse.ArgumentTypeError("expected a 2-letter language code (e.g. en, de)")
    return code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunkscribe",
        description="Transcribe audio files with a remote speech-to-text provider.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    transcribe = subparsers.add_parser("transcribe", help="Transcribe an audio file.")
    transcribe.add_argument("--input", dest="input_path", type=Path, required=True, help="Input audio file path.")
    transcribe.add_argument("--provider", choices=PROVIDER_CHOICES, default=None, help="Transcription provider.")
    transcribe.add_argument("--language", type=_language_code, default=None, help="Language hint (e.g. en).")
    transcribe.add_argument(
        "--max-concurrency",
        type=_positive_int,
        default=None,
        help="Maximum provider calls in flight for chunked recordings.",
    )
    transcribe.add_argument(
        "--chunk-seconds",
        type=_positive_int,
        default=DEFAULT_CHUNK_SECONDS,
        help="Chunk length in seconds for large recordings.",
    )
    transcribe.add_argument(
        "--overlap-seconds",
        type=_nonnegative_float,
        default=DEFAULT_OVERLAP_SECONDS,
        help="Audio repeated at the start of each chunk after the first.",
    )
    transcribe.add_argument(
        "--threshold-mb",
        type=_positive_int,
        default=DEFAULT_THRESHOLD_MB,
        help="Encoded size above which the recording is split into chunks.",
    )
    transcribe.add_argument("--output", dest="output_path", type=Path, default=None, help="Write transcript to a file.")
    transcribe.add_argument("--clipboard", action="store_true", help="Copy the transcript to the clipboard.")
    transcribe.add_argument("--verbose", "-v", action="store_true", help="Log progress and provider details.")

    config = subparsers.add_parser("config", help="Show or change saved settings.")
    config.add_argument("--provider", choices=PROVIDER_CHOICES, default=None, help="Default provider.")
    config.add_argument("--api-key", default=None, help="API key for the provider.")
    config.add_argument("--language", type=_language_code, default=None, help="Default language hint.")
    config.add_argument("--show", action="store_true", help="Show current configuration.")
    return parser


def parse_args(argv: Argv | None = None) -> argparse.Namespace:
    return build_parser().parse_args(list(argv) if argv is not None else None)


class _ProgressLine:
    """Rewrites one stderr line with the chunk count; `close` ends it if still open."""

    def __init__(self) -> None:
        self._open = False

    def __call__(self, completed: int, total: int) -> None:
        print(f"\rTranscribed {completed}/{total} chunks", end="", file=sys.stderr, flush=True)
        self._open = completed != total
        if not self._open:
            print(file=sys.stderr)

    def close(self) -> None:
        if self._open:
            print(file=sys.stderr)
            self._open = False


def build_pipeline_config(
    args: argparse.Namespace,
    settings: Settings,
    *,
    ffmpeg: Any,
    clipboard: Any | None = None,
    client: Any | None = None,
    on_progress: ProgressCallback | None = None,
) -> PipelineConfig:
    provider = Provider.parse(args.provider or settings.provider)
    request = TranscriptionRequest(
        provider=provider,
        api_key=settings.api_key_for(provider),
        language_hint=args.language or settings.language,
    )
    return PipelineConfig(
        request=request,
        ffmpeg=ffmpeg,
        max_concurrency=int(args.max_concurrency or settings.max_concurrency),
        threshold_bytes=int(args.threshold_mb) * 1024 * 1024,
        chunk_seconds=float(args.chunk_seconds),
        overlap_seconds=float(args.overlap_seconds),
        output_path=Path(args.output_path) if args.output_path is not None else None,
        clipboard=clipboard if args.clipboard else None,
        on_progress=on_progress,
        client=client,
    )


def _build_runtime_dependencies(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "ffmpeg": SubprocessFfmpeg(),
        "clipboard": CommandClipboard() if args.clipboard else None,
    }


def run_from_args(args: argparse.Namespace, *, on_progress: ProgressCallback | None = None) -> CliRunResult:
    settings = Settings.load()
    deps = _build_runtime_dependencies(args)
    config = build_pipeline_config(args, settings, on_progress=on_progress, **deps)
    logger.info("provider=%s language=%s", config.request.provider.value, config.request.language_hint)
    transcript = run_pipeline(Path(args.input_path), config)
    return CliRunResult(
        transcript=transcript,
        output_path=config.output_path,
        copied_to_clipboard=config.clipboard is not None,
    )


def run_config(args: argparse.Namespace) -> list[str]:
    path = settings_path()
    settings = Settings.load(path)

    changed = False
    if args.provider is not None:
        settings.provider = Provider.parse(args.provider).value
        changed = True
    if args.api_key is not None:
        settings.set_api_key(settings.provider, validate_api_key(settings.provider, args.api_key))
        changed = True
    if args.language is not None:
        settings.language = args.language
        changed = True

    lines: list[str] = []
    if changed:
        settings.save(path)
        lines.append(f"Settings saved to {path}")
    if args.show:
        key = settings.stored_api_key(settings.provider)
        env_var = provider_spec(settings.provider).env_var
        lines.append(f"Config file: {path}")
        lines.append(f"Provider: {settings.provider}")
        lines.append(f"Language: {settings.language or '(auto-detect)'}")
        lines.append(f"API key: {mask_api_key(key)}" if key else f"API key: (not set, using ${env_var})")
    if not lines:
        raise ValueError("nothing to do; pass --provider, --api-key, --language or --show")
    return lines


def main(argv: Argv | None = None) -> int:
    args = parse_args(argv)
    configure_logging(verbose=bool(getattr(args, "verbose", False)))
    progress = _ProgressLine()
    try:
        if args.command == "config":
            for line in run_config(args):
                print(line)
            return 0
        result = run_from_args(args, on_progress=progress)
    except Exception as exc:
        progress.close()
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(result.transcript.text)
    if result.copied_to_clipboard:
        print("Copied to clipboard", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
