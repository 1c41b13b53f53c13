from __future__ import annotations

import logging
from typing import Sequence

from chunkscribe.adapters.openai_transcription import OpenAIClientLike, build_adapter
from chunkscribe.components.assembly import assemble
from chunkscribe.components.dispatch import MAX_CONCURRENT_REQUESTS, ProgressCallback, dispatch
from chunkscribe.contracts.artifacts import Chunk, TranscriptionRequest
from chunkscribe.contracts.errors import InputValidationError
from chunkscribe.utils.time import Timer


logger = logging.getLogger(__name__)


def transcribe_one(
    request: TranscriptionRequest,
    payload: bytes,
    *,
    client: OpenAIClientLike | None = None,
) -> str:
    """Single-shot path: one synchronous provider call, text returned unchanged."""
    if not payload:
        raise InputValidationError("audio payload is empty")
    adapter = build_adapter(request, client=client)
    logger.info("transcribing %d bytes with %s", len(payload), adapter.provider)
    timer = Timer()
    text = adapter.transcribe(payload, filename="audio.mp3")
    logger.info("transcription finished in %s (%d chars)", timer, len(text))
    return text


def transcribe_many(
    request: TranscriptionRequest,
    chunks: Sequence[Chunk],
    *,
    max_concurrency: int = MAX_CONCURRENT_REQUESTS,
    on_progress: ProgressCallback | None = None,
    client: OpenAIClientLike | None = None,
) -> str:
    """
    Chunked path: transcribe chunks concurrently, then merge them in index order.
    Raises AggregateError if any chunk failed.
    """
    adapter = build_adapter(request, client=client)
    logger.info(
        "transcribing %d chunks with %s (max %d in flight)",
        len(chunks),
        adapter.provider,
        max_concurrency,
    )
    timer = Timer()
    outcomes = dispatch(chunks, adapter, max_concurrency=max_concurrency, on_progress=on_progress)
    text = assemble(outcomes)
    logger.info("merged %d chunks in %s (%d chars)", len(chunks), timer, len(text))
    return text


__all__ = ["transcribe_many", "transcribe_one"]
