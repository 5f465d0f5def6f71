"""
Quran data module for the jadhr library.

Provides the surah name tables, surah name resolution and the reference
corpus loader.
"""

from jadhr.data.surahs import (
    SURAH_COUNT,
    SURAH_NAMES_ARABIC,
    SURAH_NAMES_ENGLISH,
    resolve_chapter_number,
    result_chapter_number,
    reading_url,
    get_surah_name,
    get_english_name,
)
from jadhr.data.corpus import (
    CorpusLoader,
    get_corpus_loader,
    load_corpus_file,
    parse_corpus,
)

__all__ = [
    "SURAH_COUNT",
    "SURAH_NAMES_ARABIC",
    "SURAH_NAMES_ENGLISH",
    "resolve_chapter_number",
    "result_chapter_number",
    "reading_url",
    "get_surah_name",
    "get_english_name",
    "CorpusLoader",
    "get_corpus_loader",
    "load_corpus_file",
    "parse_corpus",
]
