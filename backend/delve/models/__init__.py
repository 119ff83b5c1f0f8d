"""Pydantic models for Dungeon Delve"""

from delve.models.adventure import AdventureContent, Beat, CharacterSpec, Choice, Encounter
from delve.models.snapshot import CharacterView, CombatView, SceneSnapshot

__all__ = [
    # Adventure content models
    "AdventureContent",
    "Beat",
    "CharacterSpec",
    "Choice",
    "Encounter",
    # Snapshot models
    "CharacterView",
    "CombatView",
    "SceneSnapshot",
]
