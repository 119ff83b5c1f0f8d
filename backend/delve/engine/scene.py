"""
Scene and scene-state model.

A scene is a phase of the session (narrative or combat) holding exactly
one ``SceneState``. The session swaps scenes wholesale; replacing the
current scene never mutates the old scene's state, so a scene can be
re-entered where it left off.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from delve.engine.actions import Action


@runtime_checkable
class SceneState(Protocol):
    """Capability set of the state driving the current screen.

    Attributes:
        output_text: Narrative text shown to the player
        actions: Actions currently offered, in display order
        show_cursor: Whether the blinking cursor is shown
    """

    output_text: str
    actions: list["Action"]
    show_cursor: bool


@dataclass
class DefaultSceneState:
    """Scene state for narrative scenes."""

    output_text: str = ""
    actions: list["Action"] = field(default_factory=list)
    show_cursor: bool = False


class Scene:
    """Container for a single scene state."""

    kind = "narrative"

    def __init__(self, state: SceneState | None = None, name: str = "scene"):
        self.name = name
        self.state: SceneState = state if state is not None else DefaultSceneState()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def find_action(self, name: str) -> "Action | None":
        """Return the offered action called ``name``, if any."""
        for action in self.state.actions:
            if action.name == name:
                return action
        return None
