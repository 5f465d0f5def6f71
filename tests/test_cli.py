"""Tests for the command-line front end."""

import json

import pytest

from jadhr import cli
from jadhr.exceptions import RemoteServiceError
from jadhr.models import MatchResult


RESULT = MatchResult(
    chapter_name="سورة الإخلاص",
    chapter_number=112,
    text="قل هو الله احد",
    verse_range_start=1,
    verse_range_end=2,
    score=0.8,
)


@pytest.fixture
def fake_identify(monkeypatch):
    calls = []

    async def identify(transcript, use_remote=True):
        calls.append((transcript, use_remote))
        return RESULT

    monkeypatch.setattr(cli, "identify", identify)
    return calls


class TestResolve:
    def test_known_name(self, capsys):
        assert cli.main(["resolve", "سورة الإخلاص"]) == 0
        assert capsys.readouterr().out.startswith("112 ")

    def test_english_name(self, capsys):
        assert cli.main(["resolve", "Al-Fatihah"]) == 0
        assert capsys.readouterr().out.startswith("1 ")

    def test_unknown_name(self, capsys):
        assert cli.main(["resolve", "nothing"]) == 1
        assert "Unknown surah" in capsys.readouterr().err


class TestIdentify:
    def test_text_output(self, fake_identify, capsys):
        assert cli.main(["identify", "قل هو الله احد"]) == 0
        out = capsys.readouterr().out
        assert "آيات 1–2" in out
        assert "https://quran.com/112" in out
        assert "score: 0.800" in out
        assert fake_identify == [("قل هو الله احد", True)]

    def test_json_output(self, fake_identify, capsys):
        assert cli.main(["identify", "--json", "--no-remote", "قل هو الله احد"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["chapter_number"] == 112
        assert data["verse_range_end"] == 2
        assert fake_identify == [("قل هو الله احد", False)]

    def test_failure(self, monkeypatch, capsys):
        async def identify(transcript, use_remote=True):
            raise RemoteServiceError()

        monkeypatch.setattr(cli, "identify", identify)
        assert cli.main(["identify", "كهيعص"]) == 1
        assert "Could not identify passage." in capsys.readouterr().err

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            cli.main([])
