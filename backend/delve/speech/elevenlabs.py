"""
Eleven Labs client - text-to-speech over HTTP
"""

import logging

import httpx
from pydantic import BaseModel, Field

from delve import config
from delve.engine.errors import SpeechError

logger = logging.getLogger(__name__)


class VoiceSettings(BaseModel):
    stability: float = 0.5
    similarity_boost: float = 0.5


class TextToSpeechRequest(BaseModel):
    """Request body for the text-to-speech endpoint"""
    text: str
    model_id: str = "eleven_monolingual_v1"
    voice_settings: VoiceSettings = Field(default_factory=VoiceSettings)


class ElevenLabsClient:
    """Async Eleven Labs client with a small surface."""

    BASE_URL = "https://api.elevenlabs.io/v1"

    def __init__(
        self,
        api_key: str,
        voice_id: str | None = None,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.voice_id = voice_id or config.get_eleven_labs_voice_id()
        self.client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {"xi-api-key": api_key, "Accept": "audio/mpeg"}

    @classmethod
    def from_environment(cls, **kwargs) -> "ElevenLabsClient":
        """
        Build a client from ELEVEN_LABS_API_KEY and ELEVEN_LABS_VOICE_ID.

        Raises:
            SpeechError: If no API key is configured
        """
        api_key = config.get_eleven_labs_api_key()
        if not api_key:
            raise SpeechError("ELEVEN_LABS_API_KEY environment variable is not set")
        return cls(api_key, **kwargs)

    async def text_to_speech(
        self,
        text: str,
        voice_id: str | None = None,
        request: TextToSpeechRequest | None = None,
    ) -> bytes:
        """
        Convert text to speech.

        Args:
            text: Text to speak
            voice_id: Optional voice override
            request: Optional full request body; ``text`` is used when omitted

        Returns:
            The audio bytes (MPEG)

        Raises:
            SpeechError: If the request fails or returns a non-2xx status
        """
        voice = voice_id or self.voice_id
        body = request or TextToSpeechRequest(text=text)
        logger.info(f"Text-to-speech: voice={voice}, chars={len(body.text)}")

        try:
            response = await self.client.post(
                f"/text-to-speech/{voice}",
                json=body.model_dump(),
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"Text-to-speech request failed: {type(e).__name__}: {e}")
            raise SpeechError(f"Text-to-speech request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"Text-to-speech failed: status={response.status_code}, body={response.text[:200]}"
            )
            raise SpeechError(
                f"Text-to-speech failed with status {response.status_code}: {response.text[:200]}"
            )

        return response.content

    async def close(self) -> None:
        await self.client.aclose()
