"""
جذر (jadhr) — Identify a recited Quran passage and play it back.

Usage:
    from jadhr import Recognizer, format_badge, play_result
    from jadhr.playback import PydubClipPlayer

    # Identify
    async with Recognizer() as recognizer:
        result = await recognizer.submit_transcript("قل هو الله احد الله الصمد")

    print(format_badge(result))   # e.g. "سورة الإخلاص • آيات 1–2"

    # Play
    async with PydubClipPlayer() as player:
        sequence = play_result(result, player)
        await sequence.wait()
"""

from jadhr.models import (
    Candidate,
    Chapter,
    MatchResult,
    RecognitionSession,
    RecognitionState,
    ReferenceCorpus,
    ResultSource,
    Verse,
)
from jadhr.config import JadhrSettings, get_settings, configure
from jadhr.exceptions import (
    JadhrError,
    CorpusUnavailableError,
    EmptyTranscriptError,
    NoConfidentMatchError,
    RemoteServiceError,
    PlaybackError,
    ConfigurationError,
    InvalidStateError,
)
from jadhr.core import format_label, format_badge, normalize_arabic
from jadhr.data import resolve_chapter_number
from jadhr.playback import play_result
from jadhr.pipeline import Recognizer, RecognitionStateMachine

__version__ = "1.0.0"
__all__ = [
    # Version
    "__version__",
    # Models
    "Verse",
    "Chapter",
    "ReferenceCorpus",
    "Candidate",
    "MatchResult",
    "ResultSource",
    "RecognitionSession",
    "RecognitionState",
    # Config
    "JadhrSettings",
    "get_settings",
    "configure",
    # Exceptions
    "JadhrError",
    "CorpusUnavailableError",
    "EmptyTranscriptError",
    "NoConfidentMatchError",
    "RemoteServiceError",
    "PlaybackError",
    "ConfigurationError",
    "InvalidStateError",
    # Pipeline
    "Recognizer",
    "RecognitionStateMachine",
    "format_label",
    "format_badge",
    "normalize_arabic",
    "resolve_chapter_number",
    "play_result",
]
