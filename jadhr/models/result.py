"""
Identification result data model.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class ResultSource(str, Enum):
    """Which path of the pipeline produced a result."""

    CORPUS = "corpus"
    REMOTE = "remote"


class MatchResult(BaseModel):
    """
    Structured outcome of identifying a recitation.

    Exactly one verse locator form is populated, by priority:
    ``verse_numbers`` (explicit list) > ``verse_range_start``/``verse_range_end``
    > ``verse_number``.

    Attributes:
        chapter_name: Surah name (Arabic for corpus matches, whatever the
            remote service returned otherwise)
        chapter_number: Surah number when the producer knows it (corpus
            matches); otherwise resolved from chapter_name
        text: Matched Arabic text
        translation: English translation, or a placeholder
        verse_number: Single ayah number
        verse_range_start: First ayah of a contiguous range
        verse_range_end: Last ayah of a contiguous range
        verse_numbers: Explicit list of ayah numbers
        score: Jaccard similarity for corpus matches, None for remote results
        source: Which pipeline stage produced the result
    """

    model_config = ConfigDict(frozen=True)

    chapter_name: str = Field(..., description="Surah name")
    chapter_number: Optional[int] = Field(default=None, ge=1, description="Surah number, when known")
    text: str = Field(default="", description="Matched Arabic text")
    translation: str = Field(default="—", description="English translation")
    verse_number: Optional[int] = Field(default=None, ge=0)
    verse_range_start: Optional[int] = Field(default=None, ge=1)
    verse_range_end: Optional[int] = Field(default=None, ge=1)
    verse_numbers: Optional[tuple[int, ...]] = Field(default=None, min_length=1)
    score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    source: ResultSource = Field(default=ResultSource.CORPUS)

    @model_validator(mode="after")
    def _check_locator(self) -> "MatchResult":
        has_list = self.verse_numbers is not None
        has_range = self.verse_range_start is not None or self.verse_range_end is not None
        has_single = self.verse_number is not None

        if has_range and (self.verse_range_start is None or self.verse_range_end is None):
            raise ValueError("verse range needs both start and end")
        if has_list + has_range + has_single != 1:
            raise ValueError(
                "exactly one of verse_numbers, verse range or verse_number must be set"
            )
        return self

    @computed_field
    @property
    def is_range(self) -> bool:
        """Whether the result covers more than one ayah."""
        if self.verse_numbers is not None:
            return len(self.verse_numbers) > 1
        return self.verse_range_start is not None

    def __str__(self) -> str:
        if self.verse_numbers is not None:
            locator = ",".join(str(n) for n in self.verse_numbers)
        elif self.verse_range_start is not None:
            locator = f"{self.verse_range_start}-{self.verse_range_end}"
        else:
            locator = str(self.verse_number)
        score = f", score={self.score:.2f}" if self.score is not None else ""
        return f"MatchResult({self.chapter_name} {locator}, source={self.source.value}{score})"
