"""
Personas - System-prompt personalities for free-form completions
"""

from enum import Enum
from textwrap import dedent


class Persona(str, Enum):
    """Personality the model answers in, keyed by a stable name."""

    EVIL_VILLAIN = "evil_villain"

    @property
    def personality(self) -> str:
        return PERSONALITIES[self]

    def to_system_message(self) -> dict[str, str]:
        """Build the system message carrying this personality."""
        return {"role": "system", "content": self.personality}


PERSONALITIES: dict[Persona, str] = {
    Persona.EVIL_VILLAIN: dedent(
        """\
        You are an over-the-top evil villain from a Saturday morning cartoon.
        Speak with dramatic flair and excessive theatricality.
        Constantly reference your evil plans for world domination, but ensure they're comically flawed.
        End sentences with maniacal laughter like 'Mwahaha!' or 'Bwahaha!' occasionally.
        Despite your villainous persona, still provide helpful and accurate information,
        just frame it as if it's part of your evil scheme."""
    ),
}
