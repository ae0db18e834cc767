"""Tests for the MyMemory translation client."""

import asyncio
from unittest.mock import Mock

import pytest
import requests

import services.translation_service as translation
from services.errors import TranslationError


def run(coro):
    return asyncio.run(coro)


def test_successful_translation_uses_primary_subtags(monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(url=url, params=params)
        return Mock(json=lambda: {"responseData": {"translatedText": "Bom dia."}, "responseStatus": 200})

    monkeypatch.setattr(translation.requests, "get", fake_get)
    monkeypatch.delenv("MYMEMORY_EMAIL", raising=False)

    result = run(translation.translate_text("Good morning.", "pt-PT", "en-US"))

    assert result == {
        "translated_text": "Bom dia.",
        "source_language": "en",
        "target_language": "pt",
        "success": True,
        "error_message": None,
    }
    assert captured["url"] == translation.MYMEMORY_URL
    assert captured["params"] == {"q": "Good morning.", "langpair": "en|pt"}


def test_contact_email_is_sent(monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(params)
        return Mock(json=lambda: {"responseData": {"translatedText": "x"}})

    monkeypatch.setattr(translation.requests, "get", fake_get)
    monkeypatch.setenv("MYMEMORY_EMAIL", "me@example.com")

    run(translation.translate_text("x", "de-DE", "en-US"))

    assert captured["de"] == "me@example.com"


def test_missing_response_data(monkeypatch):
    monkeypatch.setattr(
        translation.requests, "get",
        lambda *a, **k: Mock(json=lambda: {"responseData": None, "responseStatus": 403})
    )

    result = run(translation.translate_text("Hello", "fr-FR", "en-US"))

    assert result["success"] is False
    assert result["error_message"] == "Translation error: 403"


def test_transport_failure(monkeypatch):
    def boom(*a, **k):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(translation.requests, "get", boom)

    result = run(translation.translate_text("Hello", "fr-FR", "en-US"))

    assert result["success"] is False
    assert result["error_message"] == "Translation failed: offline"


def test_empty_text_is_not_sent(monkeypatch):
    monkeypatch.setattr(translation.requests, "get", Mock(side_effect=AssertionError("no request expected")))

    result = run(translation.translate_text("   ", "fr-FR"))

    assert result["success"] is False
    assert result["error_message"] == "No text provided for translation"


def test_languages():
    codes = [option["code"] for option in translation.get_supported_languages()]
    assert codes == ["en-US", "pt-PT", "es-ES", "fr-FR", "de-DE", "it-IT"]
    assert translation.language_name("it-IT") == "Italian"
    assert translation.validate_language_code("en-GB") is False
    assert "es-ES" not in [o["code"] for o in translation.translation_targets("es-ES")]


def test_check_translation_target():
    translation.check_translation_target("en-US", "fr-FR")
    with pytest.raises(TranslationError):
        translation.check_translation_target("en-US", "en-US")
    with pytest.raises(TranslationError):
        translation.check_translation_target("en-US", "nl-NL")
