"""
Sequential playback of the ayahs in an identification result.
"""

import asyncio
from typing import Optional

from jadhr._logging import log_error, log_playback_clip, log_warning
from jadhr.config import DEFAULT_AUDIO_URL_TEMPLATE, get_settings
from jadhr.data.surahs import result_chapter_number
from jadhr.exceptions import PlaybackError
from jadhr.models import MatchResult
from jadhr.playback.base import BaseClipPlayer


def expand_verses(result: MatchResult) -> list[int]:
    """
    List the ayah numbers a result covers, in playback order.

    Explicit list (sorted) > inclusive range > single ayah > nothing.
    """
    if result.verse_numbers:
        return sorted(result.verse_numbers)
    if result.verse_range_start and result.verse_range_end:
        return list(range(result.verse_range_start, result.verse_range_end + 1))
    if result.verse_number:
        return [result.verse_number]
    return []


def build_clip_url(
    chapter: int,
    verse: int,
    template: str = DEFAULT_AUDIO_URL_TEMPLATE,
) -> str:
    """
    Build the audio URL for one ayah.

    Examples:
        >>> build_clip_url(1, 7)
        'https://cdn.islamic.network/quran/audio/64/ar.alafasy/001007.mp3'
    """
    return template.format(chapter=chapter, verse=verse)


def can_play(result: Optional[MatchResult]) -> bool:
    """Whether a result has a resolvable surah and at least one ayah."""
    if result is None:
        return False
    return bool(result_chapter_number(result)) and bool(expand_verses(result))


class CancellationToken:
    """Cancellation flag owned by a single playback sequence."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class PlaybackSequence:
    """
    Plays the clips of one result, one after another.

    The token is checked before each clip starts; cancel() also pauses the
    clip in flight. A clip that fails to load or play ends the sequence; the failure is
    kept on ``error`` rather than raised.

    Attributes:
        verses: Ayah numbers to play, in order
        played: Ayah numbers whose clips finished
        error: The PlaybackError that ended the sequence early, if any
    """

    def __init__(
        self,
        result: MatchResult,
        chapter_number: int,
        player: BaseClipPlayer,
        url_template: Optional[str] = None,
    ):
        self.result = result
        self.chapter_number = chapter_number
        self.player = player
        self.url_template = url_template or DEFAULT_AUDIO_URL_TEMPLATE
        self.verses = expand_verses(result)
        self.token = CancellationToken()

        self.played: list[int] = []
        self.error: Optional[PlaybackError] = None
        self._playing = False
        self._task: Optional[asyncio.Task] = None

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def done(self) -> bool:
        """Whether the sequence has finished, failed or been cancelled."""
        return self._task is not None and self._task.done()

    def clip_urls(self) -> list[str]:
        """URLs of every clip in the sequence."""
        return [build_clip_url(self.chapter_number, v, self.url_template) for v in self.verses]

    async def run(self) -> list[int]:
        """
        Play every clip in order.

        Returns:
            Ayah numbers whose clips played to completion
        """
        for verse in self.verses:
            if self.token.cancelled:
                break

            url = build_clip_url(self.chapter_number, verse, self.url_template)
            log_playback_clip(self.chapter_number, verse, url)

            self._playing = True
            try:
                await self.player.play(url)
            except PlaybackError as e:
                log_warning("Recitation playback failed", url=url, error=e.message)
                self.error = e
                break
            except Exception as e:
                log_error("Recitation playback failed", exc_info=True, url=url, error=e)
                self.error = PlaybackError(f"Playback failed: {e}", url=url)
                break
            finally:
                self._playing = False

            if self.token.cancelled:
                break
            self.played.append(verse)

        return self.played

    def start(self) -> "PlaybackSequence":
        """Run the sequence as a background task on the running loop."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self

    async def wait(self) -> list[int]:
        """Wait for a started sequence to finish."""
        if self._task is None:
            return await self.run()
        return await self._task

    def cancel(self) -> None:
        """Stop before the next clip and pause the clip in flight."""
        self.token.cancel()
        if self._playing:
            self.player.pause()


def play_result(
    result: MatchResult,
    player: BaseClipPlayer,
    url_template: Optional[str] = None,
) -> PlaybackSequence:
    """
    Start playing a result and return a cancellable handle.

    Must be called from a running event loop.

    Raises:
        PlaybackError: If the surah cannot be resolved or there is nothing to play
    """
    chapter_number = result_chapter_number(result)
    if not chapter_number:
        raise PlaybackError(
            "Playback unavailable: unknown surah",
            context={"surah": result.chapter_name},
        )

    sequence = PlaybackSequence(
        result,
        chapter_number,
        player,
        url_template=url_template or get_settings().audio_url_template,
    )
    if not sequence.verses:
        raise PlaybackError(
            "Playback unavailable: no ayah numbers",
            context={"surah": result.chapter_name},
        )
    return sequence.start()
