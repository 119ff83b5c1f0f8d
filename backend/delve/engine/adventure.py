"""
Adventure state and the narrative scene.

The adventure holds what outlives any single scene: the friendly roster
carried into every encounter and the actions offered regardless of the
current scene. The narrative scene walks the adventure's beats and hands
off to combat when a choice starts an encounter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from delve.engine.actions import Action, unique_name
from delve.engine.character import Character
from delve.engine.errors import ContentError
from delve.engine.scene import DefaultSceneState, Scene

if TYPE_CHECKING:
    from delve.engine.session import GameSession
    from delve.models.adventure import AdventureContent, Choice

logger = logging.getLogger(__name__)


@dataclass
class AdventureState:
    """Session-scoped state.

    Attributes:
        actions: Actions offered in every scene
        friendly_characters: The canonical player-side roster; combat works
            on its own copy of this list
    """

    actions: list[Action] = field(default_factory=list)
    friendly_characters: list[Character] = field(default_factory=list)


class Adventure:
    """Container for the adventure state."""

    def __init__(self, title: str, state: AdventureState | None = None):
        self.title = title
        self.state = state if state is not None else AdventureState()


class NarrativeScene(Scene):
    """Scene that shows adventure beats and offers their choices."""

    kind = "narrative"

    def __init__(self, content: "AdventureContent", session: "GameSession"):
        super().__init__(DefaultSceneState(), name="narrative")
        self.content = content
        self._session = session
        self.current_beat: str | None = None

    def show_beat(self, beat_id: str) -> None:
        """Replace the narrative state with the given beat."""
        beat = self.content.get_beat(beat_id)
        if beat is None:
            raise ContentError(f"Unknown beat '{beat_id}'")

        logger.debug(f"Showing beat: {beat_id}")
        self.current_beat = beat_id
        self.state.output_text = beat.text.strip()
        self.state.show_cursor = beat.show_cursor
        self.state.actions = self.build_actions(beat.choices)

    def build_actions(self, choices: list["Choice"]) -> list[Action]:
        """Build one action per choice, with unique names."""
        actions: list[Action] = []
        taken: set[str] = set()
        for choice in choices:
            name = unique_name(choice.label, taken)
            taken.add(name)
            actions.append(Action(name, self._choice_body(choice), self._session.publish_state))
        return actions

    def _choice_body(self, choice: "Choice"):
        session = self._session

        if choice.encounter is not None:
            encounter_id = choice.encounter

            async def enter_combat() -> None:
                session.start_combat(encounter_id)

            return enter_combat

        beat_id = choice.goto

        async def go_to_beat() -> None:
            self.show_beat(beat_id)
            session.change_scene(self)

        return go_to_beat
