"""
Human-readable labels for identification results.
"""

from jadhr.models import MatchResult

SINGLE_LABEL = "آية {verse}"
RANGE_LABEL = "آيات {start}–{end}"


def format_label(result: MatchResult) -> str:
    """
    Render the ayah locator of a result.

    Examples:
        verse_number=1                     -> "آية 1"
        verse_range_start=2, verse_range_end=4 -> "آيات 2–4"
        verse_numbers=(7, 5, 6)            -> "آيات 5–7"
        verse_numbers=(3,)                 -> "آية 3"
    """
    if result.verse_numbers:
        ordered = sorted(result.verse_numbers)
        if len(ordered) > 1:
            return RANGE_LABEL.format(start=ordered[0], end=ordered[-1])
        return SINGLE_LABEL.format(verse=ordered[0])

    if result.verse_range_start and result.verse_range_end:
        return RANGE_LABEL.format(start=result.verse_range_start, end=result.verse_range_end)

    return SINGLE_LABEL.format(verse=result.verse_number or 0)


def format_badge(result: MatchResult) -> str:
    """Surah name and ayah label, e.g. "الفاتحة • آية 1"."""
    return f"{result.chapter_name} • {format_label(result)}"
