"""
Recognition pipeline.

Recognizer turns a finished transcript into a MatchResult: local corpus
matching first, the remote identifier only when that finds nothing.
RecognitionStateMachine drives one listen → process → result cycle at a
time on behalf of a UI.

Usage:
    recognizer = Recognizer()
    machine = RecognitionStateMachine(recognizer, player=PydubClipPlayer())

    machine.start_listening()
    machine.add_transcript("قل هو الله احد", is_final=True)
    session = await machine.stop_listening()

    if session.is_complete:
        print(format_badge(session.result))
        machine.play_result()
"""

from collections.abc import Callable
from typing import Optional

from jadhr._logging import get_logger, log_error, log_state_change
from jadhr.config import JadhrSettings, get_settings
from jadhr.core.arabic import normalize_arabic
from jadhr.core.matcher import LocalMatcher
from jadhr.data.corpus import CorpusLoader, get_corpus_loader
from jadhr.exceptions import (
    EmptyTranscriptError,
    InvalidStateError,
    PlaybackError,
    RemoteServiceError,
)
from jadhr.identification.base import BaseIdentifier
from jadhr.identification.remote import ChatCompletionIdentifier
from jadhr.models import MatchResult, RecognitionSession, RecognitionState
from jadhr.playback.base import BaseClipPlayer
from jadhr.playback.sequencer import PlaybackSequence, play_result

logger = get_logger(__name__)

# User-facing messages
MESSAGE_NO_AUDIO = "لم يتم التقاط صوت."
MESSAGE_NOT_IDENTIFIED = "تعذر التعرف على الآية."
MESSAGE_FAILED = "حدث خطأ أثناء التعرف."

StateListener = Callable[[RecognitionState, RecognitionState, Optional[RecognitionSession]], None]


class Recognizer:
    """
    Identify the passage behind a transcript.

    Example:
        async with Recognizer() as recognizer:
            result = await recognizer.submit_transcript("بسم الله الرحمن الرحيم")
    """

    def __init__(
        self,
        corpus_loader: Optional[CorpusLoader] = None,
        matcher: Optional[LocalMatcher] = None,
        identifier: Optional[BaseIdentifier] = None,
        use_remote: bool = True,
        settings: Optional[JadhrSettings] = None,
    ):
        """
        Initialize the recognizer.

        Args:
            corpus_loader: Corpus source (default: the process-wide loader)
            matcher: Local matcher (default: built from settings)
            identifier: Fallback identifier (default: ChatCompletionIdentifier)
            use_remote: Whether to fall back to the identifier at all
            settings: Settings instance to use
        """
        self._settings = settings or get_settings()
        self.corpus_loader = corpus_loader or get_corpus_loader()
        self.matcher = matcher or LocalMatcher(
            threshold=self._settings.match_threshold,
            ngram_size=self._settings.ngram_size,
            translation_placeholder=self._settings.translation_placeholder,
        )
        self.use_remote = use_remote
        self._identifier = identifier

    @property
    def identifier(self) -> BaseIdentifier:
        """Fallback identifier, created on first use."""
        if self._identifier is None:
            self._identifier = ChatCompletionIdentifier(settings=self._settings)
        return self._identifier

    def check_transcript(self, transcript: str) -> str:
        """
        Reject transcripts too short to identify.

        Returns:
            The normalized transcript

        Raises:
            EmptyTranscriptError: If fewer than min_transcript_length
                normalized characters remain
        """
        normalized = normalize_arabic(transcript)
        minimum = self._settings.min_transcript_length
        if not normalized or len(normalized) < minimum:
            raise EmptyTranscriptError(length=len(normalized), minimum=minimum)
        return normalized

    async def match_locally(self, transcript: str) -> Optional[MatchResult]:
        """Match against the corpus; None if unavailable or not confident."""
        corpus = await self.corpus_loader.get()
        return self.matcher.match(transcript, corpus)

    async def submit_transcript(self, transcript: str) -> MatchResult:
        """
        Identify a finished transcript.

        Args:
            transcript: Raw transcript as delivered by speech-to-text

        Returns:
            The identified passage

        Raises:
            EmptyTranscriptError: If the transcript is too short
            RemoteServiceError: If the fallback fails or cannot identify it
        """
        self.check_transcript(transcript)

        result = await self.match_locally(transcript)
        if result is not None:
            return result

        if not self.use_remote:
            raise RemoteServiceError("No confident corpus match and remote fallback disabled.")

        logger.info("No confident corpus match; asking remote identifier")
        result = await self.identifier.identify(transcript)
        if result is None:
            raise RemoteServiceError()
        return result

    async def aclose(self) -> None:
        """Close the identifier if one was created."""
        if self._identifier is not None:
            await self._identifier.aclose()

    async def __aenter__(self) -> "Recognizer":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class RecognitionStateMachine:
    """
    idle → listening → processing → (results | error) → idle.

    Only one session exists at a time. Starting a new one stops any
    playback and clears the transcript accumulator.

    Transcript fragments arrive from speech-to-text via add_transcript():
    final fragments accumulate, the latest interim fragment is kept as the
    live tail. On stop the accumulated final text is used, falling back to
    the live text when nothing was finalized.
    """

    def __init__(
        self,
        recognizer: Optional[Recognizer] = None,
        player: Optional[BaseClipPlayer] = None,
    ):
        self.recognizer = recognizer or Recognizer()
        self.player = player

        self._state = RecognitionState.IDLE
        self._session: Optional[RecognitionSession] = None
        self._final_transcript = ""
        self._interim_transcript = ""
        self._playback: Optional[PlaybackSequence] = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> RecognitionState:
        return self._state

    @property
    def session(self) -> Optional[RecognitionSession]:
        """Current session (None while idle)."""
        return self._session

    @property
    def result(self) -> Optional[MatchResult]:
        return self._session.result if self._session else None

    @property
    def playback(self) -> Optional[PlaybackSequence]:
        return self._playback

    @property
    def live_transcript(self) -> str:
        """Final text plus the current interim fragment."""
        return f"{self._final_transcript} {self._interim_transcript}".strip()

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback invoked as listener(previous, current, session)."""
        self._listeners.append(listener)

    def _set_state(self, state: RecognitionState) -> None:
        previous = self._state
        self._state = state
        log_state_change(previous.value, state.value)
        for listener in list(self._listeners):
            listener(previous, state, self._session)

    def _stop_playback(self) -> None:
        if self._playback is not None:
            self._playback.cancel()
            self._playback = None

    def start_listening(self) -> RecognitionSession:
        """
        Open a new session.

        Raises:
            InvalidStateError: If a session is still listening or processing
        """
        if self._state in (RecognitionState.LISTENING, RecognitionState.PROCESSING):
            raise InvalidStateError("start listening", self._state.value)

        self._stop_playback()
        self._final_transcript = ""
        self._interim_transcript = ""
        self._session = RecognitionSession()
        self._set_state(RecognitionState.LISTENING)
        logger.info("Listening started")
        return self._session

    def add_transcript(self, text: str, is_final: bool = True) -> None:
        """
        Feed a speech-to-text fragment.

        Raises:
            InvalidStateError: If not listening
        """
        if self._state != RecognitionState.LISTENING:
            raise InvalidStateError("add transcript", self._state.value)

        if is_final:
            self._final_transcript += text
            self._interim_transcript = ""
        else:
            self._interim_transcript = text

    async def stop_listening(self) -> RecognitionSession:
        """
        Close listening and identify the transcript.

        Returns:
            The session, now in the results or error state

        Raises:
            InvalidStateError: If not listening
        """
        if self._state != RecognitionState.LISTENING or self._session is None:
            raise InvalidStateError("stop listening", self._state.value)

        session = self._session
        transcript = self._final_transcript.strip() or self.live_transcript
        session.mark_processing(transcript)
        self._set_state(RecognitionState.PROCESSING)
        logger.info(f"Processing transcript length: {len(transcript)}")

        try:
            result = await self.recognizer.submit_transcript(transcript)
        except EmptyTranscriptError:
            logger.warning("No transcript captured")
            return self._finish_failed(session, MESSAGE_NO_AUDIO)
        except RemoteServiceError as e:
            log_error("Recognition failed", error=e)
            return self._finish_failed(session, MESSAGE_NOT_IDENTIFIED)
        except Exception as e:
            log_error("Recognition failed", exc_info=True, error=e)
            return self._finish_failed(session, MESSAGE_FAILED)

        if self._session is not session:
            # Reset while processing; the result belongs to a discarded session
            return session
        session.mark_completed(result)
        self._set_state(RecognitionState.RESULTS)
        return session

    def _finish_failed(self, session: RecognitionSession, message: str) -> RecognitionSession:
        session.mark_failed(message)
        if self._session is session:
            self._set_state(RecognitionState.ERROR)
        return session

    async def submit_transcript(self, text: str) -> RecognitionSession:
        """Run a whole session for an already finished transcript."""
        self.start_listening()
        self.add_transcript(text, is_final=True)
        return await self.stop_listening()

    def reset(self) -> None:
        """Return to idle, stopping playback and discarding the session."""
        self._stop_playback()
        self._final_transcript = ""
        self._interim_transcript = ""
        self._session = None
        if self._state != RecognitionState.IDLE:
            self._set_state(RecognitionState.IDLE)

    def play_result(self, player: Optional[BaseClipPlayer] = None) -> PlaybackSequence:
        """
        Play the current result, replacing any playback in progress.

        Raises:
            InvalidStateError: If there is no result
            PlaybackError: If the result cannot be played
        """
        if self._state != RecognitionState.RESULTS or self.result is None:
            raise InvalidStateError("play result", self._state.value)

        player = player or self.player
        if player is None:
            raise PlaybackError("No clip player configured")

        self._stop_playback()
        self._playback = play_result(self.result, player)
        return self._playback
