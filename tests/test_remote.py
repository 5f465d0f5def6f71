"""Tests for the chat-completion fallback identifier."""

import json

import httpx
import pytest

from jadhr.config import JadhrSettings
from jadhr.exceptions import ConfigurationError, RemoteServiceError
from jadhr.identification.remote import (
    SYSTEM_PROMPT,
    ChatCompletionIdentifier,
    RemotePayload,
    build_request_body,
    extract_json_object,
    extract_message_content,
    parse_identification,
)
from jadhr.models import ResultSource

from conftest import mock_client

ENDPOINT = "https://ai.example.test/chat/completions"
TRANSCRIPT = "قُلْ هُوَ اللَّهُ أَحَدٌ!"


def completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestBuildRequestBody:
    def test_shape(self):
        body = build_request_body("قل هو الله احد")
        assert body["temperature"] == 0
        assert [m["role"] for m in body["messages"]] == ["system", "user"]
        assert body["messages"][0]["content"] == SYSTEM_PROMPT
        assert body["messages"][1]["content"] == (
            "Transcript (Arabic):\nقل هو الله احد\nRespond with JSON only."
        )
        assert "model" not in body

    def test_model(self):
        assert build_request_body("x", model="gpt-x")["model"] == "gpt-x"


class TestExtractJsonObject:
    def test_plain(self):
        assert extract_json_object('{"surah": "الفاتحة", "ayah": 1}') == {"surah": "الفاتحة", "ayah": 1}

    def test_code_fence(self):
        content = '```json\n{"surah": "الناس", "ayah": 2}\n```'
        assert extract_json_object(content) == {"surah": "الناس", "ayah": 2}

    def test_prose_around(self):
        content = 'Here you go: {"surah": "الفلق", "ayah": 1} Hope this helps {not json}'
        assert extract_json_object(content) == {"surah": "الفلق", "ayah": 1}

    def test_nested(self):
        content = '{"surah": "الملك", "meta": {"k": 1}}'
        assert extract_json_object(content) == {"surah": "الملك", "meta": {"k": 1}}

    def test_skips_broken_braces(self):
        assert extract_json_object('{oops} {"ayah": 3}') == {"ayah": 3}

    @pytest.mark.parametrize("content", ["", "no json here", "[1, 2]", '{"unterminated": 1'])
    def test_none(self, content):
        assert extract_json_object(content) is None


class TestExtractMessageContent:
    def test_content(self):
        assert extract_message_content(completion("  hi  ")) == "hi"

    @pytest.mark.parametrize(
        "data",
        [{}, {"choices": []}, {"choices": [{}]}, {"choices": [{"message": {"content": None}}]}, [], None],
    )
    def test_missing(self, data):
        assert extract_message_content(data) == ""


class TestRemotePayload:
    def test_aliases(self):
        payload = RemotePayload.model_validate(
            {"chapter": "البقرة", "verse": 255, "verseStart": 1, "verseEnd": 2}
        )
        assert payload.chapter == "البقرة"
        assert payload.verse == 255
        assert (payload.verse_start, payload.verse_end) == (1, 2)

    def test_empty_key_falls_back_to_alternate(self):
        payload = RemotePayload.model_validate({"surah": "الإخلاص", "ayah": None, "verse": 3})
        assert payload.verse == 3

    def test_falsy_values_fall_back(self):
        payload = RemotePayload.model_validate(
            {
                "surah": "",
                "chapter": "الناس",
                "ayahStart": 0,
                "verseStart": 2,
                "ayahEnd": None,
                "verseEnd": "4",
            }
        )
        assert payload.chapter == "الناس"
        assert (payload.verse_start, payload.verse_end) == (2, 4)
        result = payload.to_match_result("x")
        assert (result.verse_range_start, result.verse_range_end) == (2, 4)

    def test_preferred_key_wins_when_set(self):
        payload = RemotePayload.model_validate({"surah": "x", "ayah": 1, "verse": 3})
        assert payload.verse == 1

    def test_coerces_numbers(self):
        payload = RemotePayload.model_validate({"surah": "x", "ayah": "7", "ayahStart": 2.0, "ayahEnd": "abc"})
        assert payload.verse == 7
        assert payload.verse_start == 2
        assert payload.verse_end == 0

    def test_missing_numbers_default_to_zero(self):
        payload = RemotePayload.model_validate({"surah": "x"})
        assert (payload.verse, payload.verse_start, payload.verse_end) == (0, 0, 0)
        assert payload.verse_numbers == []

    def test_verse_list_filters_invalid(self):
        payload = RemotePayload.model_validate({"surah": "x", "ayahs": ["3", "x", 0, 1, None]})
        assert payload.verse_numbers == [3, 1]

    def test_verse_list_not_a_list(self):
        assert RemotePayload.model_validate({"ayahs": "1,2"}).verse_numbers == []

    def test_list_beats_range_and_single(self):
        result = RemotePayload.model_validate(
            {"surah": "الفاتحة", "ayahs": [3, 1], "ayahStart": 5, "ayahEnd": 6, "ayah": 9}
        ).to_match_result("t")
        assert result.verse_numbers == (3, 1)
        assert result.verse_range_start is None
        assert result.verse_number is None

    def test_range_beats_single(self):
        result = RemotePayload.model_validate(
            {"surah": "الفاتحة", "ayahStart": 5, "ayahEnd": 6, "ayah": 9}
        ).to_match_result("t")
        assert (result.verse_range_start, result.verse_range_end) == (5, 6)
        assert result.verse_number is None

    def test_incomplete_range_falls_back_to_single(self):
        result = RemotePayload.model_validate(
            {"surah": "الفاتحة", "ayahStart": 5, "ayah": 9}
        ).to_match_result("t")
        assert result.verse_number == 9

    def test_defaults(self):
        result = RemotePayload.model_validate({"surah": "الفاتحة"}).to_match_result("النص")
        assert result.verse_number == 0
        assert result.text == "النص"
        assert result.translation == "—"
        assert result.source == ResultSource.REMOTE
        assert result.score is None

    def test_missing_chapter(self):
        assert RemotePayload.model_validate({"ayah": 1}).to_match_result("t") is None


class TestParseIdentification:
    def test_parses(self):
        content = '```json\n{"surah": "الإخلاص", "ayah": 1, "arabic": "قل هو الله احد", "translation": "Say, He is Allah, One"}\n```'
        result = parse_identification(content, "t")
        assert result.chapter_name == "الإخلاص"
        assert result.verse_number == 1
        assert result.translation == "Say, He is Allah, One"

    def test_no_json(self):
        assert parse_identification("I don't know", "t") is None

    def test_placeholder(self):
        result = parse_identification('{"surah": "الناس"}', "t", translation_placeholder="n/a")
        assert result.translation == "n/a"


class TestChatCompletionIdentifier:
    @pytest.mark.asyncio
    async def test_identify(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(
                200,
                json=completion('{"surah": "الإخلاص", "ayahStart": 1, "ayahEnd": 2, "translation": "Say"}'),
            )

        async with mock_client(handler) as client:
            identifier = ChatCompletionIdentifier(
                endpoint_url=ENDPOINT,
                api_key="secret",
                client=client,
                settings=JadhrSettings(_env_file=None),
            )
            result = await identifier.identify(TRANSCRIPT)

        assert seen["url"] == ENDPOINT
        assert seen["auth"] == "Bearer secret"
        # transcript is sent raw, not normalized
        assert TRANSCRIPT in seen["body"]["messages"][1]["content"]
        assert result.chapter_name == "الإخلاص"
        assert (result.verse_range_start, result.verse_range_end) == (1, 2)
        assert result.text == TRANSCRIPT

    @pytest.mark.asyncio
    async def test_no_auth_header_without_key(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json=completion('{"surah": "الناس", "ayah": 1}'))

        async with mock_client(handler) as client:
            identifier = ChatCompletionIdentifier(
                endpoint_url=ENDPOINT, client=client, settings=JadhrSettings(_env_file=None)
            )
            await identifier.identify("x")
        assert seen["auth"] is None

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        async with mock_client(lambda request: httpx.Response(503, text="busy")) as client:
            identifier = ChatCompletionIdentifier(endpoint_url=ENDPOINT, client=client)
            with pytest.raises(RemoteServiceError) as exc_info:
                await identifier.identify("x")
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with mock_client(handler) as client:
            identifier = ChatCompletionIdentifier(endpoint_url=ENDPOINT, client=client)
            with pytest.raises(RemoteServiceError):
                await identifier.identify("x")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with mock_client(lambda request: httpx.Response(200, text="<html>")) as client:
            identifier = ChatCompletionIdentifier(endpoint_url=ENDPOINT, client=client)
            assert await identifier.identify("x") is None

    @pytest.mark.asyncio
    async def test_content_without_json(self):
        async with mock_client(lambda request: httpx.Response(200, json=completion("sorry"))) as client:
            identifier = ChatCompletionIdentifier(endpoint_url=ENDPOINT, client=client)
            assert await identifier.identify("x") is None

    @pytest.mark.asyncio
    async def test_model_from_settings(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("{}"))

        settings = JadhrSettings(_env_file=None, remote_model="quran-id")
        async with mock_client(handler) as client:
            identifier = ChatCompletionIdentifier(endpoint_url=ENDPOINT, client=client, settings=settings)
            assert await identifier.identify("x") is None
        assert seen["body"]["model"] == "quran-id"

    @pytest.mark.asyncio
    async def test_does_not_close_injected_client(self):
        client = mock_client(lambda request: httpx.Response(200, json=completion("{}")))
        async with ChatCompletionIdentifier(endpoint_url=ENDPOINT, client=client):
            pass
        assert not client.is_closed
        await client.aclose()

    def test_missing_endpoint(self):
        settings = JadhrSettings(_env_file=None, remote_endpoint="")
        with pytest.raises(ConfigurationError):
            ChatCompletionIdentifier(settings=settings)
