"""
LLM API endpoints - Free-form completions
"""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from delve.llm.client import complete
from delve.llm.personas import Persona

logger = logging.getLogger(__name__)

router = APIRouter()


class CompletionRequest(BaseModel):
    """Prompt to complete, optionally in a persona's voice"""

    prompt: str
    persona: Persona | None = None


class CompletionResponse(BaseModel):
    text: str
    model: str


@router.post("", response_model=CompletionResponse)
async def create_completion(request: CompletionRequest):
    """Complete a prompt with the configured LLM"""
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must not be empty")

    try:
        completion = await complete(request.prompt, persona=request.persona)
    except Exception as e:
        logger.error(f"Completion failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return CompletionResponse(text=completion.text, model=completion.model)
