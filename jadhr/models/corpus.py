"""
Reference corpus data models.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Verse(BaseModel):
    """A single ayah of the reference corpus."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(
        default="",
        description="Ayah text (may carry diacritics)",
    )


class Chapter(BaseModel):
    """
    A surah of the reference corpus.

    Attributes:
        display_name_a: Arabic surah name as published by the source
        display_name_b: Romanized surah name as published by the source
        number: Surah number as published by the source, if any
        verses: Ayahs in order; ayah numbers start at 1
    """

    model_config = ConfigDict(frozen=True)

    display_name_a: str = Field(
        default="",
        description="Arabic surah name",
    )
    display_name_b: str = Field(
        default="",
        description="Romanized surah name",
    )
    number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Surah number",
    )
    verses: tuple[Verse, ...] = Field(
        default=(),
        description="Ayahs in order",
    )

    @property
    def verse_count(self) -> int:
        """Number of ayahs in the surah."""
        return len(self.verses)


class ReferenceCorpus(BaseModel):
    """
    The full Quran text used for local matching.

    Loaded once and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    chapters: tuple[Chapter, ...] = Field(
        ...,
        description="Surahs in mushaf order",
    )
    source: Optional[str] = Field(
        default=None,
        description="Where the corpus was loaded from",
    )

    @property
    def chapter_count(self) -> int:
        """Number of surahs (C)."""
        return len(self.chapters)

    @property
    def verse_count(self) -> int:
        """Total number of ayahs across all surahs (N)."""
        return sum(chapter.verse_count for chapter in self.chapters)

    def __str__(self) -> str:
        return (
            f"ReferenceCorpus({self.chapter_count} surahs, "
            f"{self.verse_count} ayahs, source={self.source})"
        )
