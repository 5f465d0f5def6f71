"""
Playback module for the jadhr library.

Plays the ayahs of an identification result as a cancellable sequence of
per-ayah recitation clips.
"""

from jadhr.playback.base import BaseClipPlayer
from jadhr.playback.pydub_player import PydubClipPlayer
from jadhr.playback.sequencer import (
    CancellationToken,
    PlaybackSequence,
    build_clip_url,
    can_play,
    expand_verses,
    play_result,
)

__all__ = [
    "BaseClipPlayer",
    "PydubClipPlayer",
    "CancellationToken",
    "PlaybackSequence",
    "build_clip_url",
    "can_play",
    "expand_verses",
    "play_result",
]
