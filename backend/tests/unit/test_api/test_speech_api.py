"""Unit tests for the text-to-speech endpoint."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from delve.engine.errors import SpeechError
from delve.main import app


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


def fake_speech_client(audio: bytes | None = None, error: Exception | None = None) -> MagicMock:
    speech_client = MagicMock()
    speech_client.text_to_speech = AsyncMock(return_value=audio, side_effect=error)
    speech_client.close = AsyncMock()
    return speech_client


class TestSpeechEndpoint:
    """Tests for POST /api/speech."""

    def test_returns_audio(self, client) -> None:
        speech_client = fake_speech_client(audio=b"ID3-audio")

        with patch("delve.api.speech.ElevenLabsClient") as client_class:
            client_class.from_environment.return_value = speech_client
            response = client.post("/api/speech", json={"text": "Halt!"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "audio/mpeg"
        assert response.content == b"ID3-audio"
        speech_client.text_to_speech.assert_awaited_once_with("Halt!")
        speech_client.close.assert_awaited_once()

    def test_blank_text_is_400(self, client) -> None:
        response = client.post("/api/speech", json={"text": ""})

        assert response.status_code == 400

    def test_missing_api_key_is_503(self, client, monkeypatch) -> None:
        monkeypatch.delenv("ELEVEN_LABS_API_KEY", raising=False)

        response = client.post("/api/speech", json={"text": "Halt!"})

        assert response.status_code == 503

    def test_service_error_is_502(self, client) -> None:
        speech_client = fake_speech_client(error=SpeechError("status 500"))

        with patch("delve.api.speech.ElevenLabsClient") as client_class:
            client_class.from_environment.return_value = speech_client
            response = client.post("/api/speech", json={"text": "Halt!"})

        assert response.status_code == 502
        speech_client.close.assert_awaited_once()
