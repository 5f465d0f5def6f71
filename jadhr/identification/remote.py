"""
Chat-completion based passage identifier.

Used as a fallback when the transcript has no confident match in the local
corpus. The service is asked for a strict JSON object; its reply is
normalized through RemotePayload into a MatchResult.
"""

import json
from typing import Any, Optional

import httpx
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from jadhr._logging import log_remote_request, log_remote_response, log_warning
from jadhr.config import JadhrSettings, get_settings
from jadhr.exceptions import ConfigurationError, RemoteServiceError
from jadhr.identification.base import BaseIdentifier
from jadhr.models import MatchResult, ResultSource

SYSTEM_PROMPT = (
    'حدد السورة والآية من نص عربي للقرآن. أعد JSON فقط بالمفاتيح: "surah" (اسم السورة بالعربية)، '
    'وإما "ayah" (رقم واحد) أو نطاق باستخدام "ayahStart" و"ayahEnd" (أرقام). '
    'أدرج "arabic" (النص العربي المطابق؛ وإن كان نطاقًا فادمج الآيات) و"translation" (ترجمة إنجليزية). '
    "استخدم أسماء السور العربية القياسية (الفاتحة، البقرة، …، الناس). أعد كائن JSON فقط دون أي شرح."
)

USER_TEMPLATE = "Transcript (Arabic):\n{transcript}\nRespond with JSON only."

DEFAULT_TRANSLATION = "—"


def build_request_body(transcript: str, model: Optional[str] = None) -> dict[str, Any]:
    """Build the chat-completion request body for a transcript."""
    body: dict[str, Any] = {
        "temperature": 0,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": USER_TEMPLATE.format(transcript=transcript)},
        ],
    }
    if model:
        body["model"] = model
    return body


def extract_message_content(data: Any) -> str:
    """Return ``choices[0].message.content`` or an empty string."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content.strip() if isinstance(content, str) else ""


def extract_json_object(content: str) -> Optional[dict[str, Any]]:
    """
    Find the first JSON object embedded in free text.

    Handles replies wrapped in code fences or surrounded by prose.

    Examples:
        >>> extract_json_object('```json\\n{"surah": "الفاتحة", "ayah": 1}\\n```')
        {'surah': 'الفاتحة', 'ayah': 1}
    """
    if not content:
        return None

    decoder = json.JSONDecoder()
    start = content.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(content, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, dict):
                return value
        start = content.find("{", start + 1)
    return None


# Preferred key, then the spelling used when the preferred one is empty
_KEY_FALLBACKS = (
    ("surah", "chapter"),
    ("ayah", "verse"),
    ("ayahStart", "verseStart"),
    ("ayahEnd", "verseEnd"),
)


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else 0
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
        return _coerce_int(number)
    return 0


class RemotePayload(BaseModel):
    """
    Canonical shape of the identifier's JSON reply.

    The service is inconsistent about key names, so every accepted spelling
    is mapped here and nowhere else. A key that is missing, null, zero or
    empty gives way to its alternate spelling.
    """

    model_config = ConfigDict(extra="ignore")

    chapter: str = Field(
        default="",
        validation_alias=AliasChoices("surah", "chapter"),
    )
    verse: int = Field(default=0, validation_alias=AliasChoices("ayah", "verse"))
    verse_start: int = Field(default=0, validation_alias=AliasChoices("ayahStart", "verseStart"))
    verse_end: int = Field(default=0, validation_alias=AliasChoices("ayahEnd", "verseEnd"))
    verse_numbers: list[int] = Field(default_factory=list, validation_alias="ayahs")
    text: str = Field(default="", validation_alias="arabic")
    translation: str = Field(default="", validation_alias="translation")

    @model_validator(mode="before")
    @classmethod
    def _fall_back_on_empty_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for preferred, alternate in _KEY_FALLBACKS:
            if not data.get(preferred) and data.get(alternate):
                data[preferred] = data[alternate]
        return data

    @field_validator("chapter", "text", "translation", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("verse", "verse_start", "verse_end", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> int:
        return _coerce_int(value)

    @field_validator("verse_numbers", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> list[int]:
        if not isinstance(value, list):
            return []
        return [n for n in (_coerce_int(v) for v in value) if n > 0]

    def to_match_result(
        self,
        transcript: str,
        translation_placeholder: str = DEFAULT_TRANSLATION,
    ) -> Optional[MatchResult]:
        """
        Convert to a MatchResult.

        Locator priority: explicit list > start/end range > single ayah.

        Returns:
            MatchResult, or None if the surah name is missing
        """
        if not self.chapter:
            return None

        if self.verse_numbers:
            locator: dict[str, Any] = {"verse_numbers": tuple(self.verse_numbers)}
        elif self.verse_start > 0 and self.verse_end > 0:
            locator = {"verse_range_start": self.verse_start, "verse_range_end": self.verse_end}
        else:
            locator = {"verse_number": max(self.verse, 0)}

        return MatchResult(
            chapter_name=self.chapter,
            text=self.text or transcript,
            translation=self.translation or translation_placeholder,
            source=ResultSource.REMOTE,
            **locator,
        )


def parse_identification(
    content: str,
    transcript: str,
    translation_placeholder: str = DEFAULT_TRANSLATION,
) -> Optional[MatchResult]:
    """
    Parse the identifier's reply content into a MatchResult.

    Returns:
        MatchResult, or None if no usable JSON object was found
    """
    payload_data = extract_json_object(content)
    if payload_data is None:
        return None
    try:
        payload = RemotePayload.model_validate(payload_data)
    except ValidationError as e:
        log_warning("Remote identification payload rejected", error=e)
        return None
    return payload.to_match_result(transcript, translation_placeholder)


class ChatCompletionIdentifier(BaseIdentifier):
    """
    Identify a passage by asking a chat-completion service.

    Example:
        async with ChatCompletionIdentifier() as identifier:
            result = await identifier.identify("قل هو الله احد")

    Or using environment variables:
        export JADHR_REMOTE_ENDPOINT="https://ai.hackclub.com/chat/completions"
        export JADHR_REMOTE_API_KEY="..."
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[JadhrSettings] = None,
    ):
        """
        Initialize the identifier.

        Args:
            endpoint_url: Chat-completion endpoint (overrides settings)
            api_key: Bearer token (overrides settings)
            model: Model name sent with the request (overrides settings)
            client: HTTP client to use; one is created lazily otherwise
            settings: Settings instance to use
        """
        self._settings = settings or get_settings()
        self._endpoint_url = endpoint_url or self._settings.remote_endpoint
        self._api_key = api_key or self._settings.remote_api_key
        self._model = model or self._settings.remote_model

        if not self._endpoint_url:
            raise ConfigurationError(
                "Remote identification endpoint is required. "
                "Set via endpoint_url parameter or JADHR_REMOTE_ENDPOINT env var.",
                setting_name="remote_endpoint",
            )

        self._client = client
        self._owns_client = client is None

    @property
    def endpoint_url(self) -> str:
        """Current endpoint URL."""
        return self._endpoint_url

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.remote_timeout, connect=10.0),
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this identifier created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def identify(self, transcript: str) -> Optional[MatchResult]:
        """
        Ask the service which passage the transcript belongs to.

        Args:
            transcript: Raw transcript, sent as-is (not normalized)

        Returns:
            MatchResult, or None if the reply holds no usable JSON object

        Raises:
            RemoteServiceError: On a transport error or non-success status
        """
        body = build_request_body(transcript, self._model)
        log_remote_request(self._endpoint_url, len(transcript))

        try:
            response = await self._get_client().post(
                self._endpoint_url, json=body, headers=self._headers()
            )
        except httpx.HTTPError as e:
            raise RemoteServiceError(
                f"Remote identification request failed: {e}",
                context={"endpoint": self._endpoint_url},
            ) from e

        if not response.is_success:
            raise RemoteServiceError(
                f"Remote identification API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            log_warning("Remote identification response is not JSON")
            return None

        content = extract_message_content(data)
        log_remote_response(content)

        return parse_identification(
            content, transcript, self._settings.translation_placeholder
        )
