"""
Clip player backed by pydub and simpleaudio.

Clips are downloaded with httpx, decoded with pydub (ffmpeg handles mp3) and
played through simpleaudio so that playback can be stopped mid-clip.
"""

import asyncio
import io
from typing import Optional

import httpx

from jadhr._logging import get_logger
from jadhr.config import JadhrSettings, get_settings
from jadhr.exceptions import PlaybackError
from jadhr.playback.base import BaseClipPlayer

logger = get_logger(__name__)


class PydubClipPlayer(BaseClipPlayer):
    """
    Download and play recitation clips on the local audio device.

    Example:
        async with PydubClipPlayer() as player:
            await player.play("https://cdn.islamic.network/quran/audio/64/ar.alafasy/001001.mp3")
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        audio_format: str = "mp3",
        settings: Optional[JadhrSettings] = None,
    ):
        self._settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None
        self._format = audio_format
        self._play_obj = None
        self._stopped = False

    @property
    def is_playing(self) -> bool:
        """Whether a clip is currently playing."""
        return self._play_obj is not None and self._play_obj.is_playing()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.playback_timeout, connect=10.0),
                follow_redirects=True,
            )
        return self._client

    async def _fetch(self, url: str) -> bytes:
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            raise PlaybackError(f"Failed to download clip: {e}", url=url) from e
        if not response.is_success:
            raise PlaybackError(
                f"Failed to download clip: HTTP {response.status_code}", url=url
            )
        return response.content

    def _decode(self, data: bytes, url: str):
        try:
            from pydub import AudioSegment
            from pydub.exceptions import CouldntDecodeError
        except ImportError:
            raise PlaybackError(
                "pydub not installed. Install with: pip install jadhr[playback]"
            )

        try:
            return AudioSegment.from_file(io.BytesIO(data), format=self._format)
        except (CouldntDecodeError, OSError) as e:
            raise PlaybackError(f"Failed to decode clip: {e}", url=url) from e

    async def play(self, url: str) -> None:
        """
        Download, decode and play a clip to completion.

        Raises:
            PlaybackError: If the clip cannot be downloaded, decoded or played
        """
        try:
            import simpleaudio
        except ImportError:
            raise PlaybackError(
                "simpleaudio not installed. Install with: pip install jadhr[playback]"
            )

        self._stopped = False
        data = await self._fetch(url)
        segment = self._decode(data, url)
        if self._stopped:
            logger.debug("Clip stopped before playback started")
            return

        try:
            self._play_obj = simpleaudio.play_buffer(
                segment.raw_data,
                num_channels=segment.channels,
                bytes_per_sample=segment.sample_width,
                sample_rate=segment.frame_rate,
            )
        except Exception as e:
            raise PlaybackError(f"Failed to start playback: {e}", url=url) from e

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._play_obj.wait_done)
        finally:
            self._play_obj = None

    def pause(self) -> None:
        """Stop the clip currently playing, or keep one still loading from starting."""
        self._stopped = True
        if self._play_obj is not None:
            logger.debug("Stopping recitation clip")
            self._play_obj.stop()

    async def aclose(self) -> None:
        """Close the HTTP client if this player created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
