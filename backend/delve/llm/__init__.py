"""
LLM integration for Dungeon Delve

Components:
- client: Provider-agnostic completions using LiteLLM
- personas: System-prompt personalities
- scene_describer: Structured, themed scene descriptions
"""

from delve.llm.client import (
    Completion,
    CompletionConfig,
    complete,
    get_completion,
    get_model_string,
    parse_json_response,
)
from delve.llm.personas import Persona
from delve.llm.scene_describer import SceneArchetype, SceneDescription, describe_scene

__all__ = [
    "Completion",
    "CompletionConfig",
    "complete",
    "get_completion",
    "get_model_string",
    "parse_json_response",
    "Persona",
    "SceneArchetype",
    "SceneDescription",
    "describe_scene",
]
