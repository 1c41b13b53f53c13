from __future__ import annotations

import logging
from typing import TextIO


LOGGER_NAME = "chunkscribe"
_HANDLER_NAME = "chunkscribe_stream"


def _build_stream_handler(level: int, stream: TextIO | None) -> logging.StreamHandler:
    formatter = logging.Formatter("[%(asctime)s] [%(name)s] %(message)s", "%H:%M:%S")
    stream_handler = logging.StreamHandler(stream)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)
    stream_handler.name = _HANDLER_NAME
    return stream_handler


def configure_logging(verbose: bool = False, *, stream: TextIO | None = None) -> logging.Logger:
    """Send chunkscribe logs to stderr: everything when verbose, warnings and up otherwise."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = [_build_stream_handler(level, stream)]
    logger.setLevel(level)
    logger.propagate = False
    logger.debug("verbose logging enabled")
    return logger


__all__ = ["LOGGER_NAME", "configure_logging"]
