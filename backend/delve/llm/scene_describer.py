"""
Scene describer - Ask the LLM for a structured description of what a
character can see, themed by an archetype.
"""

import logging
from enum import Enum
from textwrap import dedent

from pydantic import BaseModel, Field, ValidationError

from delve.llm.client import get_completion, parse_json_response

logger = logging.getLogger(__name__)


class SceneArchetype(str, Enum):
    """Themes that steer the style of generated scenes"""

    SWORDS_AND_DRAGONS = "swords_and_dragons"
    ELDRITCH_HORROR = "eldritch_horror"
    STEAMPUNK = "steampunk"
    CYBERPUNK = "cyberpunk"
    WILD_WEST = "wild_west"
    SPACE_OPERA = "space_opera"
    FAIRY_TALE = "fairy_tale"
    POST_APOCALYPTIC = "post_apocalyptic"

    @property
    def description(self) -> str:
        return ARCHETYPE_DESCRIPTIONS[self]

    def prompt_modifier(self) -> str:
        return dedent(f"""\
            Scene Archetype: {self.name}

            Description: {self.description}

            When creating scene descriptions, incorporate elements, imagery, and atmosphere
            consistent with this archetype. The tone, objects, creatures, and overall feel
            should reflect this theme while remaining appropriate for the context.""")


ARCHETYPE_DESCRIPTIONS: dict[SceneArchetype, str] = {
    SceneArchetype.SWORDS_AND_DRAGONS: "A high fantasy setting with medieval weapons, magic, and mythical creatures like dragons",
    SceneArchetype.ELDRITCH_HORROR: "A dark, cosmic horror setting with unsettling, otherworldly elements",
    SceneArchetype.STEAMPUNK: "A Victorian-era setting with advanced steam-powered technology and mechanical contraptions",
    SceneArchetype.CYBERPUNK: "A futuristic setting with high technology, cybernetic enhancements, and corporate dystopia",
    SceneArchetype.WILD_WEST: "A frontier setting with cowboys, outlaws, saloons, and dusty landscapes",
    SceneArchetype.SPACE_OPERA: "A grand, epic science fiction setting with interstellar travel and alien civilizations",
    SceneArchetype.FAIRY_TALE: "A whimsical, enchanted setting with magical creatures, talking animals, and moral lessons",
    SceneArchetype.POST_APOCALYPTIC: "A devastated world after a catastrophic event, focusing on survival and rebuilding",
}

DEFAULT_ARCHETYPE = SceneArchetype.SWORDS_AND_DRAGONS

NARRATOR_PROMPT = """You are a descriptive narrator for a role-playing game.
Your task is to create vivid, detailed descriptions of scenes that a character can see.

Focus on the following aspects:
- Visual elements (colors, shapes, lighting, objects, creatures, people)
- Sounds and ambient noise
- Smells and scents
- Atmosphere and mood
- Spatial relationships and layout
- Notable features or points of interest

Your descriptions should be immersive and help the player visualize the scene clearly.
Avoid making assumptions about the character's actions or feelings.
Stick to describing what can be objectively observed in the scene."""

JSON_INSTRUCTIONS = """Return your response in valid JSON format with the following structure:
{
  "scene": {
    "visual": "Description of what can be seen",
    "sounds": "Description of what can be heard",
    "smells": "Description of what can be smelled",
    "atmosphere": "Description of the overall mood and feeling",
    "layout": "Description of the spatial arrangement"
  },
  "points_of_interest": [
    {
      "name": "Name of the point of interest",
      "description": "Detailed description of this point of interest"
    }
  ]
}

Do not include any explanations, only provide a RFC8259 compliant JSON response.
Ensure the output can be parsed by a standard JSON parser."""


class SceneDetails(BaseModel):
    """Sensory breakdown of a scene"""
    visual: str
    sounds: str
    smells: str
    atmosphere: str
    layout: str


class PointOfInterest(BaseModel):
    name: str
    description: str


class SceneDescription(BaseModel):
    """Structured scene description returned by the narrator"""
    scene: SceneDetails
    points_of_interest: list[PointOfInterest] = Field(default_factory=list)


def build_system_prompt(
    archetype: SceneArchetype = DEFAULT_ARCHETYPE,
    system_prompt: str | None = None,
) -> str:
    """Combine narrator instructions, archetype theme and JSON format."""
    return "\n\n".join([
        system_prompt or NARRATOR_PROMPT,
        archetype.prompt_modifier(),
        JSON_INSTRUCTIONS,
    ])


async def describe_scene(
    prompt: str,
    archetype: SceneArchetype = DEFAULT_ARCHETYPE,
    system_prompt: str | None = None,
) -> SceneDescription:
    """
    Describe the scene summarized by ``prompt``.

    Args:
        prompt: Short summary of the scene to detail
        archetype: Theme for the description
        system_prompt: Optional replacement for the narrator instructions

    Returns:
        The parsed SceneDescription

    Raises:
        ValueError: If the reply is not a JSON scene description
    """
    messages = [
        {"role": "system", "content": build_system_prompt(archetype, system_prompt)},
        {"role": "user", "content": prompt},
    ]
    logger.debug(f"Describing scene ({archetype.name}): {prompt}")

    response = await get_completion(
        messages,
        temperature=0.8,
        max_tokens=1500,
        response_format={"type": "json_object"},
    )

    data = parse_json_response(response)
    try:
        return SceneDescription.model_validate(data)
    except ValidationError as e:
        logger.error(f"Scene description did not match the expected shape: {data}")
        raise ValueError(f"Invalid scene description from LLM: {e}") from e
