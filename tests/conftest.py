"""Test configuration and fixtures.

Provides reusable fixtures for:
- A small diacritized reference corpus (Al-Fatihah and Al-Ikhlas)
- The matching alquran.cloud style JSON document
- Fake identifier and clip player collaborators
- httpx mock transports
"""

import asyncio
import json
import os
from typing import Callable, Optional

import httpx
import pytest

from jadhr.config import JadhrSettings, reset_settings
from jadhr.data.corpus import CorpusLoader, parse_corpus
from jadhr.exceptions import PlaybackError
from jadhr.identification.base import BaseIdentifier
from jadhr.models import MatchResult, ReferenceCorpus
from jadhr.playback.base import BaseClipPlayer


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-network") or os.getenv("JADHR_RUN_NETWORK_TESTS") == "1":
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or JADHR_RUN_NETWORK_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip_network)


FATIHAH = [
    "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ",
    "الْحَمْدُ لِلَّهِ رَبِّ الْعَالَمِينَ",
    "الرَّحْمَٰنِ الرَّحِيمِ",
    "مَالِكِ يَوْمِ الدِّينِ",
    "إِيَّاكَ نَعْبُدُ وَإِيَّاكَ نَسْتَعِينُ",
    "اهْدِنَا الصِّرَاطَ الْمُسْتَقِيمَ",
    "صِرَاطَ الَّذِينَ أَنْعَمْتَ عَلَيْهِمْ غَيْرِ الْمَغْضُوبِ عَلَيْهِمْ وَلَا الضَّالِّينَ",
]

IKHLAS = [
    "قُلْ هُوَ اللَّهُ أَحَدٌ",
    "اللَّهُ الصَّمَدُ",
    "لَمْ يَلِدْ وَلَمْ يُولَدْ",
    "وَلَمْ يَكُن لَّهُ كُفُوًا أَحَدٌ",
]


def make_document(with_numbers: bool = True) -> dict:
    """Build an alquran.cloud style corpus document."""
    surahs = [
        {"number": 1, "name": "سورة الفاتحة", "englishName": "Al-Faatiha", "ayahs": FATIHAH},
        {"number": 112, "name": "سورة الإخلاص", "englishName": "Al-Ikhlaas", "ayahs": IKHLAS},
    ]
    for surah in surahs:
        surah["ayahs"] = [{"number": i + 1, "text": text} for i, text in enumerate(surah["ayahs"])]
        if not with_numbers:
            del surah["number"]
    return {"code": 200, "status": "OK", "data": {"surahs": surahs}}


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep JADHR_* variables from the environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("JADHR_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> JadhrSettings:
    return JadhrSettings(_env_file=None)


@pytest.fixture
def corpus_document() -> dict:
    return make_document()


@pytest.fixture
def corpus(corpus_document) -> ReferenceCorpus:
    result = parse_corpus(corpus_document, source="test")
    assert result is not None
    return result


@pytest.fixture
def corpus_file(tmp_path, corpus_document):
    path = tmp_path / "quran.json"
    path.write_text(json.dumps(corpus_document, ensure_ascii=False), encoding="utf-8")
    return path


class StaticCorpusLoader(CorpusLoader):
    """Corpus loader that hands out a fixed corpus (or None)."""

    def __init__(self, corpus: Optional[ReferenceCorpus], settings: Optional[JadhrSettings] = None):
        super().__init__(sources=[], settings=settings or JadhrSettings(_env_file=None))
        self.calls = 0
        self._static = corpus

    async def _load(self) -> Optional[ReferenceCorpus]:
        self.calls += 1
        return self._static


class FakeIdentifier(BaseIdentifier):
    """Identifier that records calls and returns a canned result."""

    def __init__(self, result: Optional[MatchResult] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def identify(self, transcript: str) -> Optional[MatchResult]:
        self.calls.append(transcript)
        if self.error is not None:
            raise self.error
        return self.result

    async def aclose(self) -> None:
        self.closed = True


class FakeClipPlayer(BaseClipPlayer):
    """
    Clip player driven by the test.

    With ``blocking=True`` each clip waits until ``finish()`` or ``pause()``
    is called; otherwise clips finish immediately.
    """

    def __init__(self, blocking: bool = False, fail_on: Optional[set[str]] = None):
        self.blocking = blocking
        self.fail_on = fail_on or set()
        self.started: list[str] = []
        self.paused = 0
        self.clip_started = asyncio.Event()
        self._finished: Optional[asyncio.Event] = None

    @property
    def is_playing(self) -> bool:
        return self._finished is not None

    async def play(self, url: str) -> None:
        self.started.append(url)
        if url in self.fail_on:
            raise PlaybackError("clip failed", url=url)
        if not self.blocking:
            return
        self._finished = asyncio.Event()
        self.clip_started.set()
        try:
            await self._finished.wait()
        finally:
            self._finished = None
            self.clip_started = asyncio.Event()

    def finish(self) -> None:
        if self._finished is not None:
            self._finished.set()

    def pause(self) -> None:
        self.paused += 1
        self.finish()


@pytest.fixture
def fake_player() -> FakeClipPlayer:
    return FakeClipPlayer()


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
