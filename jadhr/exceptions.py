"""
Custom exceptions for the jadhr library.

All exceptions inherit from JadhrError for easy catching of library-specific errors.
"""

from typing import Any


class JadhrError(Exception):
    """Base exception for all jadhr errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class CorpusUnavailableError(JadhrError):
    """Raised when no Quran corpus source could be loaded."""

    def __init__(
        self,
        message: str = "Quran corpus unavailable.",
        sources: list[str] | None = None,
    ) -> None:
        ctx: dict[str, Any] = {}
        if sources:
            ctx["sources"] = len(sources)
        super().__init__(message, ctx)
        self.sources = sources or []


class EmptyTranscriptError(JadhrError):
    """Raised when the captured transcript is too short to identify."""

    def __init__(self, length: int = 0, minimum: int | None = None) -> None:
        ctx: dict[str, Any] = {"length": length}
        if minimum is not None:
            ctx["minimum"] = minimum
        super().__init__("No recitation captured.", ctx)
        self.length = length


class NoConfidentMatchError(JadhrError):
    """Raised when the best corpus candidate scores below the threshold."""

    def __init__(self, best_score: float = 0.0, threshold: float | None = None) -> None:
        ctx: dict[str, Any] = {"best_score": round(best_score, 3)}
        if threshold is not None:
            ctx["threshold"] = threshold
        super().__init__("No confident corpus match.", ctx)
        self.best_score = best_score


class RemoteServiceError(JadhrError):
    """Raised when the remote identifier fails or cannot identify the passage."""

    def __init__(
        self,
        message: str = "Could not identify passage.",
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message, ctx)
        self.status_code = status_code


class PlaybackError(JadhrError):
    """Raised when a recitation clip cannot be loaded or played."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if url:
            ctx["url"] = url
        super().__init__(message, ctx)
        self.url = url


class ConfigurationError(JadhrError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        setting_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if setting_name:
            ctx["setting"] = setting_name
        super().__init__(message, ctx)
        self.setting_name = setting_name


class InvalidStateError(JadhrError):
    """Raised when a recognition action is not allowed in the current state."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(f"Cannot {action} now.", {"state": state})
        self.action = action
        self.state = state
