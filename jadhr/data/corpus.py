"""
Quran reference corpus loader.

The corpus is fetched once per process from the first source that returns a
usable document. If every source fails the corpus stays unavailable for the
lifetime of the loader; local matching is then skipped and identification
goes straight to the remote service.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from jadhr._logging import get_logger, log_corpus_loaded, log_corpus_unavailable, log_warning
from jadhr.config import JadhrSettings, get_settings
from jadhr.exceptions import CorpusUnavailableError
from jadhr.models import Chapter, ReferenceCorpus, Verse

logger = get_logger(__name__)


def parse_corpus(document: Any, source: Optional[str] = None) -> Optional[ReferenceCorpus]:
    """
    Build a corpus from an alquran.cloud style document.

    Expected shape::

        {"data": {"surahs": [{"name": "...", "englishName": "...",
                              "ayahs": [{"text": "..."}, ...]}, ...]}}

    Returns:
        ReferenceCorpus, or None if the document has no non-empty surah list
        or a surah whose fields have the wrong type. Missing fields default
        to empty.
    """
    if not isinstance(document, dict):
        return None
    data = document.get("data")
    if not isinstance(data, dict):
        return None
    surahs = data.get("surahs")
    if not isinstance(surahs, list) or not surahs:
        return None

    chapters = []
    for surah in surahs:
        if not isinstance(surah, dict):
            surah = {}
        ayahs = surah.get("ayahs") or []
        if not isinstance(ayahs, list):
            return None
        try:
            chapter = Chapter(
                display_name_a=surah.get("name") or "",
                display_name_b=surah.get("englishName") or surah.get("englishNameTranslation") or "",
                number=_surah_number(surah.get("number")),
                verses=tuple(
                    Verse(text=(ayah.get("text") or "") if isinstance(ayah, dict) else "")
                    for ayah in ayahs
                ),
            )
        except ValidationError:
            return None
        chapters.append(chapter)

    return ReferenceCorpus(chapters=tuple(chapters), source=source)


def load_corpus_file(path: str | Path) -> ReferenceCorpus:
    """
    Load a corpus from a local JSON file in the same format as the API.

    Raises:
        CorpusUnavailableError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError:
        raise CorpusUnavailableError(f"Corpus file not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise CorpusUnavailableError(f"Failed to read corpus file {path}: {e}")

    corpus = parse_corpus(document, source=str(path))
    if corpus is None:
        raise CorpusUnavailableError(f"Corpus file has no surahs: {path}")
    return corpus


def _surah_number(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
        return value
    return None


class CorpusLoader:
    """
    Load-once holder for the reference corpus.

    Concurrent callers of ``get()`` share a single in-flight load. After the
    first attempt the outcome (corpus or None) is fixed; there is no retry.

    Example:
        loader = CorpusLoader()
        corpus = await loader.get()   # None if every source failed
    """

    def __init__(
        self,
        sources: Optional[list[str]] = None,
        corpus_path: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[JadhrSettings] = None,
    ):
        """
        Initialize the loader.

        Args:
            sources: Corpus URLs tried in order (overrides settings)
            corpus_path: Local JSON file tried before the URLs (overrides settings)
            client: HTTP client to use; one is created per load otherwise
            settings: Settings instance to use
        """
        self._settings = settings or get_settings()
        self._sources = list(sources) if sources is not None else list(self._settings.corpus_sources)
        self._corpus_path = corpus_path if corpus_path is not None else self._settings.corpus_path
        self._client = client

        self._lock = asyncio.Lock()
        self._attempted = False
        self._corpus: Optional[ReferenceCorpus] = None

    @property
    def attempted(self) -> bool:
        """Whether a load has already been attempted."""
        return self._attempted

    @property
    def corpus(self) -> Optional[ReferenceCorpus]:
        """The loaded corpus, or None if not loaded (yet or ever)."""
        return self._corpus

    async def get(self) -> Optional[ReferenceCorpus]:
        """
        Return the corpus, loading it on first use.

        Returns:
            The corpus, or None if it is unavailable
        """
        if self._attempted:
            return self._corpus

        async with self._lock:
            if not self._attempted:
                try:
                    self._corpus = await self._load()
                finally:
                    self._attempted = True
        return self._corpus

    async def require(self) -> ReferenceCorpus:
        """
        Return the corpus or raise.

        Raises:
            CorpusUnavailableError: If no source could be loaded
        """
        corpus = await self.get()
        if corpus is None:
            raise CorpusUnavailableError(sources=self._sources)
        return corpus

    async def _load(self) -> Optional[ReferenceCorpus]:
        attempted = 0

        if self._corpus_path:
            attempted += 1
            try:
                corpus = load_corpus_file(self._corpus_path)
            except CorpusUnavailableError as e:
                log_warning("Corpus load failed", source=self._corpus_path, error=e)
            else:
                log_corpus_loaded(self._corpus_path, corpus.chapter_count, corpus.verse_count)
                return corpus

        if self._sources:
            if self._client is not None:
                corpus, tried = await self._load_remote(self._client)
            else:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self._settings.corpus_timeout, connect=10.0),
                    follow_redirects=True,
                ) as client:
                    corpus, tried = await self._load_remote(client)
            attempted += tried
            if corpus is not None:
                return corpus

        log_corpus_unavailable(attempted)
        return None

    async def _load_remote(
        self, client: httpx.AsyncClient
    ) -> tuple[Optional[ReferenceCorpus], int]:
        tried = 0
        for url in self._sources:
            tried += 1
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                log_warning("Corpus load failed", source=url, error=e)
                continue

            if not response.is_success:
                log_warning("Corpus load failed", source=url, status=response.status_code)
                continue

            try:
                document = response.json()
            except ValueError as e:
                log_warning("Corpus response is not JSON", source=url, error=e)
                continue

            corpus = parse_corpus(document, source=url)
            if corpus is None:
                log_warning("Corpus response has no usable surahs", source=url)
                continue

            log_corpus_loaded(url, corpus.chapter_count, corpus.verse_count)
            return corpus, tried

        return None, tried


_default_loader: Optional[CorpusLoader] = None


def get_corpus_loader() -> CorpusLoader:
    """Process-wide corpus loader built from the active settings."""
    global _default_loader
    if _default_loader is None:
        _default_loader = CorpusLoader()
    return _default_loader
