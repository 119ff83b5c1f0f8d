"""
Speech API endpoints - Text-to-speech
"""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from delve.engine.errors import SpeechError
from delve.speech.elevenlabs import ElevenLabsClient

logger = logging.getLogger(__name__)

router = APIRouter()


class SpeechRequest(BaseModel):
    text: str


@router.post("")
async def text_to_speech(request: SpeechRequest):
    """Speak text and return MPEG audio"""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text must not be empty")

    try:
        client = ElevenLabsClient.from_environment()
    except SpeechError as e:
        raise HTTPException(status_code=503, detail=str(e))

    try:
        audio = await client.text_to_speech(request.text)
    except SpeechError as e:
        raise HTTPException(status_code=502, detail=str(e))
    finally:
        await client.close()

    return Response(content=audio, media_type="audio/mpeg")
