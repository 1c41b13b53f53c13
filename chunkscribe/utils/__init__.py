"""Small shared helpers."""

from __future__ import annotations

from .time import Timer, format_duration

__all__ = ["Timer", "format_duration"]
