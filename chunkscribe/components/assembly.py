from __future__ import annotations

from typing import Iterable

from chunkscribe.contracts.artifacts import ChunkOutcome
from chunkscribe.contracts.errors import AggregateError


# Roughly a few seconds of speech; bounds both the overlap detected and the search cost.
MAX_OVERLAP_WORDS = 15


def remove_overlap(existing: str, incoming: str, *, max_words: int = MAX_OVERLAP_WORDS) -> str:
    """
    Drop the leading words of `incoming` that repeat the tail of `existing`.

    Finds the longest run (up to `max_words`) where the last k words of
    `existing` equal the first k words of `incoming`, ignoring case. Returns
    `incoming` unchanged when nothing matches.
    """
    existing_words = existing.split()
    incoming_words = incoming.split()
    if not existing_words or not incoming_words:
        return incoming

    search_len = min(max_words, len(existing_words), len(incoming_words))
    best = 0
    for overlap_len in range(1, search_len + 1):
        tail = existing_words[-overlap_len:]
        head = incoming_words[:overlap_len]
        if all(a.lower() == b.lower() for a, b in zip(tail, head)):
            best = overlap_len

    if best > 0:
        return " ".join(incoming_words[best:])
    return incoming


def _append(merged: str, piece: str) -> str:
    if not piece:
        return merged
    if merged and not merged.endswith(" ") and not piece.startswith(" "):
        return f"{merged} {piece}"
    return merged + piece


def merge_outcomes(ordered: list[ChunkOutcome]) -> str:
    """Fold index-ordered successful outcomes into one transcript."""
    if not ordered:
        return ""
    if len(ordered) == 1:
        return (ordered[0].text or "").strip()

    merged = ""
    for position, outcome in enumerate(ordered):
        text = (outcome.text or "").strip()
        if position == 0:
            merged = text
        elif outcome.has_leading_overlap:
            merged = _append(merged, remove_overlap(merged, text))
        else:
            merged = _append(merged, text)
    return merged


def assemble(outcomes: Iterable[ChunkOutcome]) -> str:
    """
    Merge chunk outcomes into the final transcript.

    All-or-nothing: if any chunk failed, raise AggregateError listing every
    failure. Arrival order does not matter; chunks are merged by index.
    """
    collected = sorted(outcomes, key=lambda outcome: outcome.index)
    failures = [outcome for outcome in collected if not outcome.ok]
    if failures:
        raise AggregateError(
            failed_count=len(failures),
            total_count=len(collected),
            causes=[outcome.cause for outcome in failures if outcome.cause is not None],
        )
    return merge_outcomes(collected)


__all__ = ["MAX_OVERLAP_WORDS", "assemble", "merge_outcomes", "remove_overlap"]
