"""
Pydantic data models for the jadhr library.

These models represent the core data structures used throughout the library:
- Verse, Chapter, ReferenceCorpus: the Quran text used for local matching
- Candidate: a single ayah or adjacent-ayah pair considered while matching
- MatchResult: the structured outcome of identifying a recitation
- RecognitionSession: one listen → process → result cycle
"""

from jadhr.models.corpus import Chapter, ReferenceCorpus, Verse
from jadhr.models.candidate import Candidate, ScoredCandidate
from jadhr.models.result import MatchResult, ResultSource
from jadhr.models.session import RecognitionSession, RecognitionState

__all__ = [
    "Verse",
    "Chapter",
    "ReferenceCorpus",
    "Candidate",
    "ScoredCandidate",
    "MatchResult",
    "ResultSource",
    "RecognitionSession",
    "RecognitionState",
]
