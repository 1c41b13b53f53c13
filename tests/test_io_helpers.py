from __future__ import annotations

import json
from pathlib import Path

import pytest

from chunkscribe.pipeline import io as io_module
from chunkscribe.pipeline.io import write_settings_json, write_transcript
from chunkscribe.utils.time import Timer, format_duration


def test_write_transcript_normalizes_trailing_newline(tmp_path: Path) -> None:
    path = write_transcript(tmp_path / "out" / "memo.txt", "Line one.\nLine two.\n\n  ")

    assert path.read_text(encoding="utf-8") == "Line one.\nLine two.\n"
    assert [p.name for p in path.parent.iterdir()] == ["memo.txt"]


def test_write_settings_json_is_sorted_and_unicode(tmp_path: Path) -> None:
    path = write_settings_json(tmp_path / "settings.json", {"provider": "openai", "language": "ü"})

    body = path.read_text(encoding="utf-8")
    assert body.index('"language"') < body.index('"provider"')
    assert json.loads(body) == {"language": "ü", "provider": "openai"}


def test_failed_write_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "memo.txt"
    path.write_text("old\n", encoding="utf-8")

    def broken_replace(src, dst):  # type: ignore[no-untyped-def]
        raise OSError("disk full")

    monkeypatch.setattr(io_module.os, "replace", broken_replace)

    with pytest.raises(OSError, match="disk full"):
        write_transcript(path, "new")
    assert path.read_text(encoding="utf-8") == "old\n"
    assert [p.name for p in tmp_path.iterdir()] == ["memo.txt"]


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0.04, "0.0s"), (12.34, "12.3s"), (65.2, "1m05.2s"), (600.0, "10m00.0s")],
)
def test_format_duration(seconds: float, expected: str) -> None:
    assert format_duration(seconds) == expected


def test_timer_never_reports_negative_elapsed() -> None:
    timer = Timer(started_s=float("inf"))
    assert timer.elapsed_s() == 0.0
    assert str(timer) == "0.0s"
