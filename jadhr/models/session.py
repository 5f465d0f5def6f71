"""
Recognition session data model.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from jadhr.models.result import MatchResult


class RecognitionState(str, Enum):
    """State of the recognition state machine."""

    IDLE = "idle"
    LISTENING = "listening"
    PROCESSING = "processing"
    RESULTS = "results"
    ERROR = "error"


class RecognitionSession(BaseModel):
    """
    One listen → process → result cycle.

    Attributes:
        id: Unique identifier for this session
        state: Current state of the session
        transcript: Transcript handed to the pipeline (set when processing starts)
        result: Identification result (set on success)
        error_message: User-facing message (set on failure)
        created_at: Timestamp when listening started
        completed_at: Timestamp when the session reached results or error
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this session",
    )
    state: RecognitionState = Field(
        default=RecognitionState.LISTENING,
        description="Current state of the session",
    )
    transcript: str = Field(
        default="",
        description="Transcript handed to the pipeline",
    )
    result: Optional[MatchResult] = Field(
        default=None,
        description="Identification result",
    )
    error_message: Optional[str] = Field(
        default=None,
        description="User-facing error message",
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="Timestamp when listening started",
    )
    completed_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the session finished",
    )

    @property
    def is_complete(self) -> bool:
        """Whether the session produced a result."""
        return self.state == RecognitionState.RESULTS

    @property
    def is_failed(self) -> bool:
        """Whether the session ended in an error."""
        return self.state == RecognitionState.ERROR

    @property
    def processing_duration(self) -> Optional[float]:
        """Seconds from listening start to completion (if finished)."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.created_at).total_seconds()

    def mark_processing(self, transcript: str) -> None:
        """Freeze the transcript and move to processing."""
        self.transcript = transcript
        self.state = RecognitionState.PROCESSING

    def mark_completed(self, result: MatchResult) -> None:
        """Mark the session as completed with a result."""
        self.result = result
        self.state = RecognitionState.RESULTS
        self.completed_at = datetime.now()

    def mark_failed(self, error_message: str) -> None:
        """Mark the session as failed with a user-facing message."""
        self.state = RecognitionState.ERROR
        self.error_message = error_message
        self.completed_at = datetime.now()

    def __str__(self) -> str:
        return f"RecognitionSession({self.id}, state={self.state.value})"
