"""
Tests for title suggestions, with and without a Gemini client.
"""
import pytest

from neoncover.app.errors import ConfigError, TitleSuggestionError
from neoncover.llms.providers.gemini_client import GeminiTitleClient, parse_title_lines
from neoncover.llms.title_suggestions import default_titles, suggest_titles


class _Response:
    def __init__(self, text):
        self.text = text


class _Models:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents})
        if self.error:
            raise self.error
        return _Response(self.text)


class FakeGenai:
    def __init__(self, text=None, error=None):
        self.models = _Models(text, error)


def test_default_titles():
    assert default_titles("Space") == [
        "EPIC SPACE",
        "Space MASTERCLASS",
        "ULTIMATE SPACE GUIDE",
        "Space SECRETS REVEALED",
        "THE SPACE CHRONICLES",
    ]


def test_suggest_titles_without_client_strips_topic():
    assert suggest_titles("  cats ")[0] == "EPIC CATS"


def test_suggest_titles_with_client():
    fake = FakeGenai(text="1. Cats In Space\n2) \"Purrfect Orbit\"\n- Meow Mission\n\n")
    client = GeminiTitleClient(client=fake, model="test-model")

    titles = suggest_titles("cats", client)

    assert titles == ["Cats In Space", "Purrfect Orbit", "Meow Mission"]
    assert fake.models.calls[0]["model"] == "test-model"
    assert "cats" in fake.models.calls[0]["contents"]


def test_provider_error_is_wrapped():
    client = GeminiTitleClient(client=FakeGenai(error=RuntimeError("quota")))
    with pytest.raises(TitleSuggestionError):
        client.generate_titles("cats")


def test_empty_response_is_an_error():
    client = GeminiTitleClient(client=FakeGenai(text="   \n"))
    with pytest.raises(TitleSuggestionError):
        client.generate_titles("cats")


def test_missing_key_is_config_error(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(ConfigError):
        GeminiTitleClient()


def test_parse_title_lines_limit():
    assert parse_title_lines("a\nb\nc", 2) == ["a", "b"]
