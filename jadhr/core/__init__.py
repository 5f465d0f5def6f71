"""
Core modules for the jadhr library.

This package contains the core matching logic:
- Arabic text normalization
- Character n-gram similarity
- Candidate index over the corpus
- Local transcript matching
- Result label formatting
"""

from jadhr.core.arabic import normalize_arabic, normalize_chapter_name
from jadhr.core.ngrams import to_ngrams, similarity, text_similarity
from jadhr.core.candidates import build_candidates, iter_candidates
from jadhr.core.matcher import LocalMatcher, candidate_to_result
from jadhr.core.formatting import format_label, format_badge

__all__ = [
    # Arabic
    "normalize_arabic",
    "normalize_chapter_name",
    # N-grams
    "to_ngrams",
    "similarity",
    "text_similarity",
    # Candidates
    "build_candidates",
    "iter_candidates",
    # Matcher
    "LocalMatcher",
    "candidate_to_result",
    # Formatting
    "format_label",
    "format_badge",
]
