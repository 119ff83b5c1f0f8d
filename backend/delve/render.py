"""
Snapshot renderer.

Turns the adventure state and the current scene state into the JSON
string pushed to viewers. Rendering is pure and total: it never mutates
state and never raises for a well-formed state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from delve.engine.combat import CombatSceneState
from delve.models.snapshot import CharacterView, CombatView, SceneSnapshot

if TYPE_CHECKING:
    from delve.engine.adventure import AdventureState
    from delve.engine.character import Character
    from delve.engine.scene import SceneState


def _character_view(
    character: "Character", state: CombatSceneState | None = None
) -> CharacterView:
    view = CharacterView(
        name=character.name,
        is_enemy=character.is_enemy,
        health=character.health,
        attack=character.attack,
    )
    if state is not None:
        view.is_current_turn = character is state.current_character()
        view.recently_attacked = character is state.recently_attacked
        view.selected = character is state.selected_enemy()
    return view


def _combat_view(state: CombatSceneState) -> CombatView:
    current = state.current_character()
    selected = state.selected_enemy()
    return CombatView(
        turn_order=[_character_view(c, state) for c in state.turn_order],
        enemies=[_character_view(c, state) for c in state.enemies()],
        friendlies=[_character_view(c, state) for c in state.friendlies()],
        current_turn=current.name if current else None,
        selected_enemy=selected.name if selected else None,
        outcome=state.outcome.value if state.outcome else None,
    )


def build_snapshot(
    adventure_state: "AdventureState", scene_state: "SceneState"
) -> SceneSnapshot:
    """Build the snapshot model for the given states."""
    is_combat = isinstance(scene_state, CombatSceneState)
    return SceneSnapshot(
        kind="combat" if is_combat else "narrative",
        output_text=scene_state.output_text,
        show_cursor=scene_state.show_cursor,
        actions=[action.name for action in scene_state.actions],
        adventure_actions=[action.name for action in adventure_state.actions],
        party=[_character_view(c) for c in adventure_state.friendly_characters],
        combat=_combat_view(scene_state) if is_combat else None,
    )


def render_snapshot(adventure_state: "AdventureState", scene_state: "SceneState") -> str:
    """Render the given states as a compact JSON string."""
    return build_snapshot(adventure_state, scene_state).model_dump_json()
