from __future__ import annotations

import itertools

import pytest

from chunkscribe.components.assembly import MAX_OVERLAP_WORDS, assemble, remove_overlap
from chunkscribe.contracts.artifacts import ChunkOutcome
from chunkscribe.contracts.errors import AggregateError, ProviderError, TransportError


def _ok(index: int, text: str, overlap: bool = False) -> ChunkOutcome:
    return ChunkOutcome.success(index, text, has_leading_overlap=overlap)


def test_remove_overlap_drops_longest_matching_prefix() -> None:
    assert remove_overlap("and then the quick brown fox", "brown fox jumps") == "jumps"


def test_remove_overlap_is_case_insensitive() -> None:
    assert remove_overlap("we flew to New York", "new york was cold") == "was cold"


def test_remove_overlap_prefers_longest_match_over_first_match() -> None:
    # "la" matches at k=1, "la la la" at k=3; the longest wins.
    assert remove_overlap("sing la la la", "la la la la song") == "la song"


def test_remove_overlap_without_match_returns_incoming_unchanged() -> None:
    assert remove_overlap("hello there", "  general kenobi ") == "  general kenobi "


def test_remove_overlap_with_empty_side_returns_incoming() -> None:
    assert remove_overlap("", "hello world") == "hello world"
    assert remove_overlap("hello", "   ") == "   "


def test_remove_overlap_can_consume_whole_incoming_text() -> None:
    assert remove_overlap("one two three", "two three") == ""


def test_overlap_of_sixteen_words_is_not_detected() -> None:
    words = [f"w{i}" for i in range(16)]
    existing = "start " + " ".join(words)
    incoming = " ".join(words) + " tail"

    assert MAX_OVERLAP_WORDS == 15
    assert remove_overlap(existing, incoming) == incoming


def test_overlap_of_fifteen_words_is_detected() -> None:
    words = [f"w{i}" for i in range(15)]
    existing = "start " + " ".join(words)
    incoming = " ".join(words) + " tail"

    assert remove_overlap(existing, incoming) == "tail"


def test_assemble_empty_is_empty_string() -> None:
    assert assemble([]) == ""


def test_assemble_single_chunk_is_trimmed() -> None:
    assert assemble([_ok(0, " hello world ")]) == "hello world"


def test_assemble_without_overlap_joins_with_single_space() -> None:
    assert assemble([_ok(0, "hello"), _ok(1, "world")]) == "hello world"


def test_assemble_removes_duplicate_words_at_overlapping_boundary() -> None:
    outcomes = [
        _ok(0, "and then the quick brown fox"),
        _ok(1, "brown fox jumps over", overlap=True),
        _ok(2, "over the lazy dog.", overlap=True),
    ]
    assert assemble(outcomes) == "and then the quick brown fox jumps over the lazy dog."


def test_assemble_does_not_search_overlap_when_flag_is_unset() -> None:
    outcomes = [_ok(0, "the quick brown fox"), _ok(1, "brown fox jumps")]
    assert assemble(outcomes) == "the quick brown fox brown fox jumps"


def test_assemble_skips_separator_for_empty_pieces() -> None:
    outcomes = [_ok(0, "one two"), _ok(1, "one two", overlap=True), _ok(2, "   "), _ok(3, "three")]
    assert assemble(outcomes) == "one two three"


def test_assemble_does_not_lead_with_space_when_first_chunk_is_empty() -> None:
    assert assemble([_ok(0, ""), _ok(1, "hello")]) == "hello"


def test_assemble_is_independent_of_arrival_order() -> None:
    outcomes = [
        _ok(0, "It was a bright cold day"),
        _ok(1, "cold day in April and the", overlap=True),
        _ok(2, "clocks were striking", overlap=False),
        _ok(3, "Striking thirteen.", overlap=True),
    ]
    expected = "It was a bright cold day in April and the clocks were striking thirteen."
    for permutation in itertools.permutations(outcomes):
        assert assemble(list(permutation)) == expected


def test_assemble_any_failure_raises_aggregate_error_without_text() -> None:
    outcomes = [
        _ok(0, "fine"),
        ChunkOutcome.failure(2, TransportError("timed out")),
        _ok(1, "also fine"),
        ChunkOutcome.failure(3, ProviderError(500, "server error", provider="openai")),
    ]

    with pytest.raises(AggregateError) as exc_info:
        assemble(outcomes)

    err = exc_info.value
    assert err.failed_count == 2
    assert err.total_count == 4
    assert [type(cause) for cause in err.causes] == [TransportError, ProviderError]
    message = str(err)
    assert message.startswith("Failed to transcribe 2 of 4 chunks:")
    assert "timed out" in message
    assert "server error" in message


def test_assemble_single_failure_among_many_successes_still_fails() -> None:
    outcomes = [_ok(i, f"chunk {i}") for i in range(9)]
    outcomes.append(ChunkOutcome.failure(9, TransportError("reset")))

    with pytest.raises(AggregateError) as exc_info:
        assemble(outcomes)
    assert exc_info.value.failed_count == 1
    assert exc_info.value.total_count == 10
