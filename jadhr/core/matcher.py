"""
Local matching of a transcript against the reference corpus.
"""

from typing import Optional

from jadhr._logging import get_logger, log_local_match
from jadhr.core.arabic import normalize_arabic
from jadhr.core.candidates import iter_candidates
from jadhr.core.ngrams import DEFAULT_NGRAM_SIZE, similarity, to_ngrams
from jadhr.exceptions import NoConfidentMatchError
from jadhr.models import Candidate, MatchResult, ReferenceCorpus, ResultSource, ScoredCandidate

DEFAULT_THRESHOLD = 0.12
DEFAULT_TRANSLATION = "—"

logger = get_logger(__name__)


def candidate_to_result(
    scored: ScoredCandidate,
    translation: str = DEFAULT_TRANSLATION,
) -> MatchResult:
    """Convert a scored candidate into a MatchResult."""
    candidate = scored.candidate
    if candidate.is_pair:
        locator = {
            "verse_range_start": candidate.verse_range_start,
            "verse_range_end": candidate.verse_range_end,
        }
    else:
        locator = {"verse_number": candidate.verse_number}

    return MatchResult(
        chapter_name=candidate.chapter_name,
        chapter_number=candidate.chapter_number,
        text=candidate.text,
        translation=translation,
        score=scored.score,
        source=ResultSource.CORPUS,
        **locator,
    )


class LocalMatcher:
    """
    Find the corpus ayah (or adjacent ayah pair) closest to a transcript.

    Candidates are scored by Jaccard similarity of character n-grams.
    The highest score wins; on an exact tie the earlier candidate is kept.
    Nothing below ``threshold`` is ever returned.

    The corpus is immutable, so candidate n-gram sets are built once per
    corpus instance and reused across calls.

    Example:
        matcher = LocalMatcher()
        result = matcher.match("قل هو الله احد", corpus)
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        ngram_size: int = DEFAULT_NGRAM_SIZE,
        translation_placeholder: str = DEFAULT_TRANSLATION,
    ):
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold
        self.ngram_size = ngram_size
        self.translation_placeholder = translation_placeholder

        self._indexed_corpus: Optional[ReferenceCorpus] = None
        self._index: list[tuple[Candidate, frozenset[str]]] = []

    def _get_index(self, corpus: ReferenceCorpus) -> list[tuple[Candidate, frozenset[str]]]:
        if self._indexed_corpus is not corpus:
            index = []
            for candidate in iter_candidates(corpus):
                normalized = normalize_arabic(candidate.text)
                if not normalized:
                    continue
                index.append((candidate, to_ngrams(normalized, self.ngram_size)))
            self._index = index
            self._indexed_corpus = corpus
            logger.debug(f"Indexed {len(index)} candidates from {corpus}")
        return self._index

    def best_candidate(
        self,
        transcript: str,
        corpus: Optional[ReferenceCorpus],
    ) -> Optional[ScoredCandidate]:
        """
        Score every candidate and return the best one, regardless of threshold.

        Returns:
            The best scored candidate, or None when the corpus is absent,
            the transcript normalizes to nothing, or there are no candidates
        """
        if corpus is None:
            return None

        normalized = normalize_arabic(transcript)
        if not normalized:
            return None

        transcript_ngrams = to_ngrams(normalized, self.ngram_size)

        best: Optional[Candidate] = None
        best_score = 0.0
        for candidate, candidate_ngrams in self._get_index(corpus):
            score = similarity(transcript_ngrams, candidate_ngrams)
            # Strict comparison keeps the first of equally scored candidates
            if best is None or score > best_score:
                best = candidate
                best_score = score

        if best is None:
            return None
        return ScoredCandidate(candidate=best, score=best_score)

    def match(
        self,
        transcript: str,
        corpus: Optional[ReferenceCorpus],
    ) -> Optional[MatchResult]:
        """
        Identify a transcript against the corpus.

        Args:
            transcript: Raw (unnormalized) transcript
            corpus: Loaded corpus, or None when it is unavailable

        Returns:
            MatchResult when the best candidate reaches the threshold, else None
        """
        scored = self.best_candidate(transcript, corpus)
        if scored is None or scored.score < self.threshold:
            if scored is not None:
                logger.info(
                    f"Best corpus score {scored.score:.3f} below threshold {self.threshold}"
                )
            return None

        result = candidate_to_result(scored, self.translation_placeholder)
        log_local_match(scored.score, scored.candidate.chapter_name, _locator_text(scored.candidate))
        return result

    def require_match(
        self,
        transcript: str,
        corpus: Optional[ReferenceCorpus],
    ) -> MatchResult:
        """
        Like match(), but raise when there is no confident match.

        Raises:
            NoConfidentMatchError: If no candidate reaches the threshold
        """
        result = self.match(transcript, corpus)
        if result is None:
            scored = self.best_candidate(transcript, corpus)
            raise NoConfidentMatchError(
                best_score=scored.score if scored else 0.0,
                threshold=self.threshold,
            )
        return result


def _locator_text(candidate: Candidate) -> str:
    if candidate.is_pair:
        return f"{candidate.verse_range_start}-{candidate.verse_range_end}"
    return str(candidate.verse_number)
