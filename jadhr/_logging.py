"""
Structured logging utilities for the jadhr library.

Provides a configured logger and helper functions for consistent logging.
"""

import logging
import sys
from typing import Optional


# Default format for jadhr logs
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "jadhr") -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name (default: "jadhr")

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    stream: Optional[object] = None,
) -> logging.Logger:
    """
    Configure logging for the jadhr library.

    Args:
        level: Logging level (default: INFO)
        format_string: Log format string (default: DEFAULT_FORMAT)
        date_format: Date format string (default: DEFAULT_DATE_FORMAT)
        stream: Output stream (default: sys.stderr)

    Returns:
        Configured root logger for jadhr
    """
    logger = logging.getLogger("jadhr")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            format_string or DEFAULT_FORMAT,
            datefmt=date_format or DEFAULT_DATE_FORMAT,
        )
    )
    logger.addHandler(handler)

    return logger


def enable_debug_logging() -> None:
    """Enable debug-level logging for the jadhr library."""
    configure_logging(level=logging.DEBUG)


def disable_logging() -> None:
    """Disable all jadhr logging."""
    logger = logging.getLogger("jadhr")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())


_logger = get_logger()


def log_corpus_loaded(source: str, chapter_count: int, verse_count: int) -> None:
    """Log a successful corpus load."""
    _logger.info(
        f"Quran corpus loaded from {source}: "
        f"{chapter_count} surahs, {verse_count} ayahs"
    )


def log_corpus_unavailable(attempted: int) -> None:
    """Log that every corpus source failed."""
    _logger.warning(
        f"Quran corpus unavailable after {attempted} source(s); "
        "local matching disabled"
    )


def log_local_match(score: float, chapter_name: str, label: str) -> None:
    """Log the best local candidate."""
    _logger.info(f"Corpus match score: {score:.3f} ({chapter_name} {label})")


def log_remote_request(endpoint: str, transcript_length: int) -> None:
    """Log an outgoing remote identification request."""
    _logger.info(
        f"Remote identification request: {endpoint} "
        f"(transcript length {transcript_length})"
    )


def log_remote_response(content: str) -> None:
    """Log the raw content returned by the remote identifier."""
    _logger.debug(f"Remote identification response content: {content}")


def log_playback_clip(chapter: int, verse: int, url: str) -> None:
    """Log the start of a recitation clip."""
    _logger.info(f"Playing recitation {chapter}:{verse} ({url})")


def log_state_change(previous: str, current: str) -> None:
    """Log a recognition state transition."""
    _logger.debug(f"State: {previous} -> {current}")


def log_warning(message: str, **context) -> None:
    """Log a warning with optional context."""
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        _logger.warning(f"{message} ({ctx_str})")
    else:
        _logger.warning(message)


def log_error(message: str, exc_info: bool = False, **context) -> None:
    """Log an error with optional context and exception info."""
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        _logger.error(f"{message} ({ctx_str})", exc_info=exc_info)
    else:
        _logger.error(message, exc_info=exc_info)
