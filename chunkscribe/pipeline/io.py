from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Iterator, Mapping


@contextmanager
def _replace_atomically(path: Path) -> Iterator[IO[bytes]]:
    """Yield a temp file next to `path`; it replaces `path` only if the block succeeds."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".part", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            yield handle
            handle.flush()
            try:
                os.fsync(handle.fileno())
            except OSError:
                # fsync is unsupported on some filesystems.
                pass
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def write_transcript(path: Path, text: str) -> Path:
    """Write transcript text with exactly one trailing newline."""
    path = Path(path)
    with _replace_atomically(path) as handle:
        handle.write((text.rstrip() + "\n").encode("utf-8"))
    return path


def write_settings_json(path: Path, data: Mapping[str, Any]) -> Path:
    path = Path(path)
    body = json.dumps(dict(data), indent=2, sort_keys=True, ensure_ascii=False) + "\n"
    with _replace_atomically(path) as handle:
        handle.write(body.encode("utf-8"))
    return path


__all__ = ["write_settings_json", "write_transcript"]
