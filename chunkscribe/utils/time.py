from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(slots=True)
class Timer:
    """Monotonic stopwatch started on construction."""

    started_s: float = field(default_factory=time.monotonic)

    def elapsed_s(self) -> float:
        return max(0.0, time.monotonic() - self.started_s)

    def __str__(self) -> str:
        return format_duration(self.elapsed_s())


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m{rest:04.1f}s"


__all__ = ["Timer", "format_duration"]
