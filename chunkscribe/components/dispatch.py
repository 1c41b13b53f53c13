from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Sequence, TypeAlias

from chunkscribe.adapters.transcription import TranscriptionAdapter
from chunkscribe.contracts.artifacts import Chunk, ChunkOutcome
from chunkscribe.contracts.errors import InputValidationError, TranscriptionError, WorkerFault


logger = logging.getLogger(__name__)

MAX_CONCURRENT_REQUESTS = 3

ProgressCallback: TypeAlias = Callable[[int, int], None]


class _CompletionCounter:
    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def _validate_batch(chunks: Sequence[Chunk], max_concurrency: int) -> None:
    if max_concurrency < 1:
        raise InputValidationError("max_concurrency must be >= 1")
    seen: set[int] = set()
    for chunk in chunks:
        if chunk.index in seen:
            raise InputValidationError(f"duplicate chunk index: {chunk.index}")
        seen.add(chunk.index)


def dispatch(
    chunks: Sequence[Chunk],
    adapter: TranscriptionAdapter,
    *,
    max_concurrency: int = MAX_CONCURRENT_REQUESTS,
    on_progress: ProgressCallback | None = None,
) -> list[ChunkOutcome]:
    """
    Transcribe every chunk and return one outcome per chunk, in completion order.

    Every chunk is submitted up front; only the provider call is gated by an
    admission token, so at most `max_concurrency` calls are in flight at once.
    Failures are recorded per chunk and never cancel sibling work.
    """
    _validate_batch(chunks, max_concurrency)
    total = len(chunks)
    if total == 0:
        return []

    tokens = threading.BoundedSemaphore(max_concurrency)
    completed = _CompletionCounter()

    def run_unit(chunk: Chunk) -> ChunkOutcome:
        logger.debug("chunk %d: waiting for admission token", chunk.index)
        try:
            with tokens:
                logger.debug("chunk %d: calling provider", chunk.index)
                text = adapter.transcribe(chunk.payload, filename=chunk.filename)
        except TranscriptionError as exc:
            logger.warning("chunk %d failed: %s", chunk.index, exc)
            return ChunkOutcome.failure(chunk.index, exc)

        done = completed.increment()
        if on_progress is not None:
            on_progress(done, total)
        logger.debug("chunk %d: done (%d/%d)", chunk.index, done, total)
        return ChunkOutcome.success(chunk.index, text, has_leading_overlap=chunk.has_leading_overlap)

    outcomes: list[ChunkOutcome] = []
    with ThreadPoolExecutor(max_workers=total, thread_name_prefix="chunkscribe-chunk") as executor:
        futures: dict[Future[ChunkOutcome], int] = {
            executor.submit(run_unit, chunk): chunk.index for chunk in chunks
        }
        for future in as_completed(futures):
            index = futures[future]
            try:
                outcomes.append(future.result())
            except Exception as exc:
                logger.warning("chunk %d: worker crashed: %r", index, exc)
                fault = WorkerFault(f"chunk {index}: worker crashed: {exc!r}")
                fault.__cause__ = exc
                outcomes.append(ChunkOutcome.failure(index, fault))

    logger.debug("dispatch finished: %d/%d chunks succeeded", completed.value, total)
    return outcomes


__all__ = ["MAX_CONCURRENT_REQUESTS", "ProgressCallback", "dispatch"]
