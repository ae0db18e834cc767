"""Tests for server-side audio transcription."""

import asyncio
from types import SimpleNamespace

import services.whisper_service as whisper


class FakeUpload:
    filename = "clip.webm"
    content_type = "audio/webm"

    async def read(self):
        return b"audio-bytes"


class FakeTranscriptions:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.params = None

    def create(self, **params):
        self.params = params
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def install(monkeypatch, transcriptions):
    client = SimpleNamespace(audio=SimpleNamespace(transcriptions=transcriptions))
    monkeypatch.setattr(whisper, "get_client", lambda: client)


def test_transcribe_with_language_hint(monkeypatch):
    transcriptions = FakeTranscriptions(text="  olá a todos  ")
    install(monkeypatch, transcriptions)

    result = asyncio.run(whisper.transcribe_audio(FakeUpload(), "pt-PT"))

    assert result["success"] is True
    assert result["text"] == "olá a todos"
    assert transcriptions.params["language"] == "pt"
    assert transcriptions.params["file"] == ("clip.webm", b"audio-bytes", "audio/webm")


def test_transcription_error(monkeypatch):
    install(monkeypatch, FakeTranscriptions(error=RuntimeError("quota exceeded")))

    result = asyncio.run(whisper.transcribe_audio(FakeUpload()))

    assert result["success"] is False
    assert result["error_message"] == "Error during transcription: quota exceeded"
