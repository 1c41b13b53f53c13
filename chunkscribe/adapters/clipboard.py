from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Protocol, Sequence

from chunkscribe.contracts.errors import ClipboardError


logger = logging.getLogger(__name__)

FLATPAK_INFO_PATH = Path("/.flatpak-info")

# Tried in order; the first whose executable is on PATH wins.
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("pbcopy",),
)
FLATPAK_CLIPBOARD_COMMAND: tuple[str, ...] = ("flatpak-spawn", "--host", "wl-copy")


class Clipboard(Protocol):
    def copy(self, text: str) -> None:
        """Place text on the system clipboard."""


def resolve_clipboard_command(
    *,
    which: Callable[[str], str | None] = shutil.which,
    in_flatpak: bool | None = None,
) -> list[str]:
    if in_flatpak is None:
        in_flatpak = FLATPAK_INFO_PATH.exists()
    # Inside a Flatpak sandbox only the host's wl-copy reaches the session clipboard.
    if in_flatpak:
        return list(FLATPAK_CLIPBOARD_COMMAND)
    for cmd in CLIPBOARD_COMMANDS:
        if which(cmd[0]):
            return list(cmd)
    names = ", ".join(cmd[0] for cmd in CLIPBOARD_COMMANDS)
    raise ClipboardError(f"no clipboard command found on PATH (tried {names})")


class CommandClipboard:
    """Clipboard backed by a command that reads the text from stdin."""

    def __init__(self, command: Sequence[str] | None = None) -> None:
        self._command = list(command) if command is not None else None

    def copy(self, text: str) -> None:
        cmd = self._command or resolve_clipboard_command()
        logger.debug("copying %d chars via %s", len(text), cmd[0])
        try:
            completed = subprocess.run(cmd, input=text.encode("utf-8"), capture_output=True, check=False)
        except FileNotFoundError as exc:
            raise ClipboardError(f"clipboard command not found: {cmd[0]}") from exc
        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            raise ClipboardError(stderr or f"{cmd[0]} exited with status {completed.returncode}")


__all__ = ["CLIPBOARD_COMMANDS", "Clipboard", "CommandClipboard", "resolve_clipboard_command"]
