"""
Candidate index over the reference corpus.
"""

from collections.abc import Iterator

from jadhr.models import Candidate, Chapter, ReferenceCorpus


def chapter_display_name(chapter: Chapter, number: int) -> str:
    """Arabic name of a surah, or "سورة <n>" when the source has none."""
    return chapter.display_name_a or f"سورة {number}"


def iter_candidates(corpus: ReferenceCorpus) -> Iterator[Candidate]:
    """
    Yield every single ayah and every adjacent pair of ayahs.

    Order is surah order, then ayah order, with the single ayah before the
    pair that starts with it. Pairs never cross a surah boundary.
    """
    for ordinal, chapter in enumerate(corpus.chapters, start=1):
        number = chapter.number or ordinal
        name = chapter_display_name(chapter, number)
        verses = chapter.verses

        for i, verse in enumerate(verses):
            yield Candidate(
                chapter_name=name,
                chapter_number=number,
                verse_number=i + 1,
                text=verse.text,
            )

            if i + 1 < len(verses):
                yield Candidate(
                    chapter_name=name,
                    chapter_number=number,
                    verse_range_start=i + 1,
                    verse_range_end=i + 2,
                    text=f"{verse.text} {verses[i + 1].text}",
                )


def build_candidates(corpus: ReferenceCorpus) -> list[Candidate]:
    """
    Build the full candidate list for a corpus.

    A corpus with N ayahs across C surahs yields 2N - C candidates.
    """
    return list(iter_candidates(corpus))
