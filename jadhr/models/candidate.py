"""
Matching candidate data model.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Candidate(BaseModel):
    """
    A single ayah or a pair of adjacent ayahs considered during local matching.

    Exactly one of ``verse_number`` or the ``verse_range_start``/``verse_range_end``
    pair is set.
    """

    model_config = ConfigDict(frozen=True)

    chapter_name: str = Field(..., description="Arabic surah name")
    chapter_number: Optional[int] = Field(default=None, ge=1, description="Surah number")
    verse_number: Optional[int] = Field(default=None, ge=1)
    verse_range_start: Optional[int] = Field(default=None, ge=1)
    verse_range_end: Optional[int] = Field(default=None, ge=1)
    text: str = Field(..., description="Candidate text, pairs space-joined")

    @model_validator(mode="after")
    def _check_locator(self) -> "Candidate":
        has_range = self.verse_range_start is not None or self.verse_range_end is not None
        if has_range:
            if self.verse_range_start is None or self.verse_range_end is None:
                raise ValueError("verse range needs both start and end")
            if self.verse_number is not None:
                raise ValueError("set either verse_number or a verse range, not both")
        elif self.verse_number is None:
            raise ValueError("candidate needs a verse_number or a verse range")
        return self

    @property
    def is_pair(self) -> bool:
        """Whether this candidate spans two ayahs."""
        return self.verse_range_start is not None

    def __str__(self) -> str:
        if self.is_pair:
            return f"Candidate({self.chapter_name} {self.verse_range_start}-{self.verse_range_end})"
        return f"Candidate({self.chapter_name} {self.verse_number})"


class ScoredCandidate(BaseModel):
    """A candidate together with its similarity to a transcript."""

    model_config = ConfigDict(frozen=True)

    candidate: Candidate
    score: float = Field(..., ge=0.0, le=1.0)
