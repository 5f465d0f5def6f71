"""
Arabic text normalization.

Recitation transcripts arrive without diacritics while the reference corpus
carries full tashkeel, so both sides are reduced to the same bare letter
skeleton before matching.
"""

import re

# Harakat, Quranic annotation signs and superscript alif
_HARAKAT_PATTERN = re.compile(r"[\u064B-\u065F\u0670\u06D6-\u06ED]")
# Honorific signs and small high letters
_MARKS_PATTERN = re.compile(r"[\u0610-\u061A\u06EE\u06EF]")
_ALIF_PATTERN = re.compile(r"[\u0622\u0623\u0625]")
_NON_ARABIC_PATTERN = re.compile(r"[^\u0600-\u06FF\s]")
_WHITESPACE_PATTERN = re.compile(r"\s+")

# "سورة" / "سوره" after normalization (ta marbuta is folded to ha)
_SURAH_PREFIX_PATTERN = re.compile(r"^سوره?\s+")


def normalize_arabic(text: str | None) -> str:
    """
    Normalize Arabic text for matching.

    Steps:
    - Strip harakat and Quranic annotation marks
    - Fold آ/أ/إ to ا, ى to ي and ة to ه
    - Replace anything outside the Arabic block (and whitespace) with a space
    - Collapse whitespace and trim

    Args:
        text: Input text (None is treated as empty)

    Returns:
        Normalized text, empty if nothing Arabic remains

    Examples:
        >>> normalize_arabic("بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ")
        'بسم الله الرحمن الرحيم'
    """
    if not text:
        return ""

    text = _HARAKAT_PATTERN.sub("", text)
    text = _MARKS_PATTERN.sub("", text)
    text = _ALIF_PATTERN.sub("\u0627", text)
    text = text.replace("\u0649", "\u064A")
    text = text.replace("\u0629", "\u0647")
    text = _NON_ARABIC_PATTERN.sub(" ", text)
    text = _WHITESPACE_PATTERN.sub(" ", text)
    return text.strip()


def normalize_chapter_name(name: str | None) -> str:
    """
    Normalize a surah name and drop a leading "سورة" word.

    Examples:
        >>> normalize_chapter_name("سُورَةُ الفَاتِحَةِ")
        'الفاتحه'
    """
    return _SURAH_PREFIX_PATTERN.sub("", normalize_arabic(name))
