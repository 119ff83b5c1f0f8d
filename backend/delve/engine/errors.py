"""
Engine exceptions.

Every error here is scoped to a single command or a single background
job; none of them is fatal to the session.
"""


class GameError(Exception):
    """Base class for game engine errors."""


class ActionNotFoundError(GameError):
    """Raised when a dispatched action name is not currently offered."""

    def __init__(self, action_name: str):
        self.action_name = action_name
        super().__init__(f"Action '{action_name}' not found")


class ContentError(GameError):
    """Raised when adventure content is malformed or references unknown ids."""


class SpeechError(GameError):
    """Raised when the text-to-speech service returns an error."""
