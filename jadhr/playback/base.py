"""
Abstract base class for recitation clip players.
"""

from abc import ABC, abstractmethod


class BaseClipPlayer(ABC):
    """
    Abstract interface for playing one audio clip at a time.

    Example:
        class MyPlayer(BaseClipPlayer):
            async def play(self, url: str) -> None:
                ...

            def pause(self) -> None:
                ...
    """

    @abstractmethod
    async def play(self, url: str) -> None:
        """
        Play a clip and return when it has finished or was paused.

        Args:
            url: Clip location

        Raises:
            PlaybackError: If the clip cannot be loaded or played
        """
        pass

    @abstractmethod
    def pause(self) -> None:
        """Stop the clip in flight, including one still loading, if any."""
        pass

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        """Whether a clip is currently playing."""
        pass

    async def aclose(self) -> None:
        """Release any held resources."""

    async def __aenter__(self) -> "BaseClipPlayer":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.pause()
        await self.aclose()
