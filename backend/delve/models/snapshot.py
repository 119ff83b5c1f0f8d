"""
Snapshot models - Pydantic models for the rendered state pushed to viewers
"""

from typing import Literal

from pydantic import BaseModel, Field


class CharacterView(BaseModel):
    """A character as seen by the viewer"""
    name: str
    is_enemy: bool
    health: int            # Not clamped, may be negative right after a killing blow
    attack: int
    is_current_turn: bool = False
    recently_attacked: bool = False  # Drives the client hit-flash animation
    selected: bool = False


class CombatView(BaseModel):
    """Combat-specific part of a snapshot"""
    turn_order: list[CharacterView] = Field(default_factory=list)
    enemies: list[CharacterView] = Field(default_factory=list)
    friendlies: list[CharacterView] = Field(default_factory=list)
    current_turn: str | None = None
    selected_enemy: str | None = None
    outcome: str | None = None  # "victory", "defeat" or None while fighting


class SceneSnapshot(BaseModel):
    """Everything a viewer needs to draw the current screen"""
    kind: Literal["narrative", "combat"]
    output_text: str = ""
    show_cursor: bool = False
    actions: list[str] = Field(default_factory=list)            # Scene action names
    adventure_actions: list[str] = Field(default_factory=list)  # Always-available action names
    party: list[CharacterView] = Field(default_factory=list)    # Friendly roster
    combat: CombatView | None = None
