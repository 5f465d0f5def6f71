"""
Character n-gram similarity.

Recitation transcripts are noisy at the word level (merged or split words,
dropped letters), so matching works on overlapping character windows rather
than whole words.
"""

from jadhr.core.arabic import normalize_arabic

DEFAULT_NGRAM_SIZE = 3


def to_ngrams(text: str, n: int = DEFAULT_NGRAM_SIZE) -> frozenset[str]:
    """
    Build the set of all length-n substrings of text.

    Args:
        text: Input string (normally already normalized)
        n: Window length

    Returns:
        Set of n-grams, empty when the text is shorter than n

    Examples:
        >>> sorted(to_ngrams("abcd"))
        ['abc', 'bcd']
    """
    if n < 1:
        raise ValueError(f"n-gram size must be positive, got {n}")
    return frozenset(text[i:i + n] for i in range(len(text) - n + 1))


def similarity(a: frozenset[str] | set[str], b: frozenset[str] | set[str]) -> float:
    """
    Jaccard index of two n-gram sets.

    The union is treated as 1 when both sets are empty, so two empty sets
    score 0.0 rather than dividing by zero.

    Returns:
        |a ∩ b| / |a ∪ b|, in [0.0, 1.0]
    """
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return intersection / (union or 1)


def text_similarity(a: str, b: str, n: int = DEFAULT_NGRAM_SIZE) -> float:
    """Normalize two strings and return their n-gram similarity."""
    return similarity(to_ngrams(normalize_arabic(a), n), to_ngrams(normalize_arabic(b), n))
