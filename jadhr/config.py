"""
Configuration for the jadhr library.

Settings are read from environment variables prefixed with ``JADHR_``
(and from a local ``.env`` file when present), e.g.:

    export JADHR_REMOTE_API_KEY="sk-..."
    export JADHR_MATCH_THRESHOLD=0.15
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jadhr.exceptions import ConfigurationError

DEFAULT_CORPUS_SOURCES = [
    "https://api.alquran.cloud/v1/quran/quran-simple",
    "https://api.alquran.cloud/v1/quran/quran-uthmani",
]
DEFAULT_REMOTE_ENDPOINT = "https://ai.hackclub.com/chat/completions"
DEFAULT_AUDIO_URL_TEMPLATE = (
    "https://cdn.islamic.network/quran/audio/64/ar.alafasy/"
    "{chapter:03d}{verse:03d}.mp3"
)
DEFAULT_READING_URL_TEMPLATE = "https://quran.com/{chapter}"


class JadhrSettings(BaseSettings):
    """Runtime settings for corpus loading, matching, identification and playback."""

    model_config = SettingsConfigDict(
        env_prefix="JADHR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Corpus
    corpus_sources: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CORPUS_SOURCES),
        description="Corpus URLs, tried in order",
    )
    corpus_path: Optional[str] = Field(
        default=None,
        description="Local corpus JSON file tried before the URLs",
    )
    corpus_timeout: float = Field(default=30.0, gt=0)

    # Local matching
    match_threshold: float = Field(default=0.12, ge=0.0, le=1.0)
    ngram_size: int = Field(default=3, ge=1)
    min_transcript_length: int = Field(default=6, ge=0)
    translation_placeholder: str = "—"

    # Remote identification
    remote_endpoint: str = DEFAULT_REMOTE_ENDPOINT
    remote_api_key: Optional[str] = None
    remote_model: Optional[str] = None
    remote_timeout: float = Field(default=60.0, gt=0)

    # Playback
    audio_url_template: str = DEFAULT_AUDIO_URL_TEMPLATE
    reading_url_template: str = DEFAULT_READING_URL_TEMPLATE
    playback_timeout: float = Field(default=30.0, gt=0)

    @field_validator("audio_url_template")
    @classmethod
    def _check_audio_template(cls, value: str) -> str:
        if "{chapter" not in value or "{verse" not in value:
            raise ValueError("audio_url_template needs {chapter} and {verse} fields")
        return value


_settings: Optional[JadhrSettings] = None


@lru_cache(maxsize=1)
def _default_settings() -> JadhrSettings:
    return JadhrSettings()


def get_settings() -> JadhrSettings:
    """
    Get the active settings.

    Returns the instance installed by configure(), or one built from the
    environment on first use.
    """
    if _settings is not None:
        return _settings
    return _default_settings()


def configure(**overrides) -> JadhrSettings:
    """
    Replace the active settings.

    Args:
        **overrides: Field values layered over the environment defaults

    Returns:
        The new active settings

    Raises:
        ConfigurationError: If an override is invalid
    """
    global _settings
    try:
        _settings = JadhrSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        setting = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid setting: {first.get('msg')}", setting_name=setting
        ) from e
    return _settings


def reset_settings() -> None:
    """Drop configured settings and re-read the environment on next use."""
    global _settings
    _settings = None
    _default_settings.cache_clear()
