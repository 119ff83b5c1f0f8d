"""
LLM client - Provider-agnostic LLM integration using LiteLLM
"""

import os
import json
import logging
import re
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel

from delve.llm.personas import Persona

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)


class CompletionConfig(BaseModel):
    """Sampling settings for a completion request"""
    temperature: float = 0.7
    max_tokens: int = 1000
    model: str | None = None  # Overrides the configured model


class Completion(BaseModel):
    """Completed text plus token accounting when the provider reports it"""
    text: str
    model: str
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


def get_provider() -> str:
    """Get configured LLM provider"""
    return os.getenv("LLM_PROVIDER", "openai")


def get_model() -> str:
    """Get configured model name"""
    return os.getenv("LLM_MODEL", "gpt-3.5-turbo")


def get_model_string() -> str:
    """Get the full model string for LiteLLM"""
    provider = get_provider()
    model = get_model()

    # LiteLLM uses prefixed model names for some providers
    if provider == "gemini":
        return f"gemini/{model}"
    elif provider == "anthropic":
        return f"anthropic/{model}"
    elif provider == "ollama":
        return f"ollama/{model}"
    else:
        # OpenAI doesn't need a prefix
        return model


async def _acompletion(**kwargs: Any) -> Any:
    import litellm

    # Configure API keys from environment
    _configure_api_keys()
    return await litellm.acompletion(**kwargs)


async def get_completion(
    messages: list[dict[str, str]],
    model: str | None = None,
    temperature: float = 0.7,
    max_tokens: int = 1000,
    response_format: dict | None = None,
) -> str:
    """
    Get completion text from configured LLM provider.

    Args:
        messages: List of message dicts with 'role' and 'content'
        model: Optional model override
        temperature: Creativity (0-1)
        max_tokens: Maximum response length
        response_format: Optional format specification

    Returns:
        The generated text response
    """
    completion = await _complete_messages(
        messages,
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        response_format=response_format,
    )
    return completion.text


async def complete(
    prompt: str,
    persona: Persona | None = None,
    config: CompletionConfig | None = None,
) -> Completion:
    """
    Complete a single prompt, optionally in the voice of a persona.

    Args:
        prompt: The user prompt
        persona: Optional personality used as the system prompt
        config: Sampling settings

    Returns:
        The Completion with text, model and token usage
    """
    config = config or CompletionConfig()
    messages = []
    if persona is not None:
        messages.append(persona.to_system_message())
    messages.append({"role": "user", "content": prompt})

    return await _complete_messages(
        messages,
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


async def _complete_messages(
    messages: list[dict[str, str]],
    model: str | None,
    temperature: float,
    max_tokens: int,
    response_format: dict | None = None,
) -> Completion:
    model_string = model or get_model_string()

    logger.info(
        f"LLM Request: model={model_string}, temperature={temperature}, max_tokens={max_tokens}"
    )
    logger.debug(
        f"Messages: {len(messages)} messages, response_format={response_format}"
    )

    # Build completion kwargs
    kwargs: dict[str, Any] = {
        "model": model_string,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }

    # Note: Not all models support JSON mode
    if response_format:
        kwargs["response_format"] = response_format

    try:
        logger.info("Calling LiteLLM...")
        response = await _acompletion(**kwargs)
    except Exception as e:
        logger.error(f"LLM Error: {type(e).__name__}: {e}")
        raise

    choice = response.choices[0]
    content = choice.message.content or ""
    finish_reason = getattr(choice, "finish_reason", "unknown")

    logger.info(
        f"LLM Response: finish_reason={finish_reason}, content_length={len(content)}"
    )

    if finish_reason == "length":
        logger.warning(
            f"Response TRUNCATED due to max_tokens limit ({max_tokens}). Consider increasing max_tokens."
        )

    if not content:
        logger.warning(f"LLM returned empty content. Full response: {response}")

    usage = getattr(response, "usage", None)
    return Completion(
        text=content,
        model=getattr(response, "model", None) or model_string,
        prompt_tokens=getattr(usage, "prompt_tokens", None),
        completion_tokens=getattr(usage, "completion_tokens", None),
        total_tokens=getattr(usage, "total_tokens", None),
    )


def _configure_api_keys():
    """Configure API keys for LiteLLM from environment"""
    import litellm

    provider = get_provider()
    logger.debug(f"Configuring API keys for provider: {provider}")

    if provider == "gemini":
        api_key = os.getenv("GEMINI_API_KEY")
        if api_key:
            os.environ["GEMINI_API_KEY"] = api_key
        else:
            logger.warning("GEMINI_API_KEY not found in environment")

    elif provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if api_key:
            litellm.api_key = api_key
        else:
            logger.warning("OPENAI_API_KEY not found in environment")

    elif provider == "anthropic":
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if api_key:
            os.environ["ANTHROPIC_API_KEY"] = api_key
        else:
            logger.warning("ANTHROPIC_API_KEY not found in environment")

    elif provider == "ollama":
        base_url = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
        os.environ["OLLAMA_API_BASE"] = base_url
        logger.debug(f"OLLAMA_API_BASE configured: {base_url}")


def parse_json_response(response: str | None) -> dict:
    """
    Parse a JSON object from an LLM response.
    Handles markdown code blocks and surrounding chatter.

    Raises:
        ValueError: If the response is empty or holds no JSON object
    """
    # Handle None or empty response
    if response is None or not response.strip():
        raise ValueError("LLM returned empty response. Please try again.")

    # Remove markdown code blocks if present
    cleaned = response.strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        # Try to extract JSON from the response
        json_match = re.search(r"\{[\s\S]*\}", cleaned)
        if not json_match:
            parsed = None
        else:
            try:
                parsed = json.loads(json_match.group())
            except json.JSONDecodeError:
                parsed = None

    if not isinstance(parsed, dict):
        snippet = cleaned[:200] + "..." if len(cleaned) > 200 else cleaned
        raise ValueError(
            f"Failed to parse JSON from LLM response. "
            f"The AI may have returned malformed or truncated output. "
            f"Response preview: {snippet}"
        )
    return parsed
