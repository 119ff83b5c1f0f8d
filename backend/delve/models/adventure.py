"""
Adventure schema models - Pydantic models for YAML adventure definitions
"""

from pydantic import BaseModel, Field, model_validator

from delve.engine.character import Character


class CharacterSpec(BaseModel):
    """Combat participant template"""
    name: str
    health: int = Field(gt=0)
    attack: int = Field(ge=0)

    def build(self, is_enemy: bool) -> Character:
        """Create a fresh Character from this template"""
        return Character(
            name=self.name,
            is_enemy=is_enemy,
            health=self.health,
            attack=self.attack,
        )


class Choice(BaseModel):
    """A player choice leading to another beat or into combat"""
    label: str
    goto: str | None = None       # Beat id to show next
    encounter: str | None = None  # Encounter id to start

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "Choice":
        if (self.goto is None) == (self.encounter is None):
            raise ValueError(f"Choice '{self.label}' needs exactly one of goto/encounter")
        return self


class Beat(BaseModel):
    """One screen of narrative"""
    id: str
    text: str = ""
    show_cursor: bool = False
    choices: list[Choice] = Field(default_factory=list)


class Encounter(BaseModel):
    """Enemies met in a combat encounter"""
    name: str = ""
    enemies: list[CharacterSpec] = Field(default_factory=list)


class AdventureContent(BaseModel):
    """Complete adventure definition from <adventure>.yaml"""
    title: str
    opening: str                                   # Beat id shown when the session starts
    party: list[CharacterSpec] = Field(default_factory=list)
    beats: list[Beat] = Field(default_factory=list)
    encounters: dict[str, Encounter] = Field(default_factory=dict)
    global_choices: list[Choice] = Field(default_factory=list)  # Offered in every scene
    reinforcement: CharacterSpec = Field(
        default_factory=lambda: CharacterSpec(name="Goblin Reinforcement", health=30, attack=5)
    )

    def get_beat(self, beat_id: str) -> Beat | None:
        for beat in self.beats:
            if beat.id == beat_id:
                return beat
        return None

    def get_encounter(self, encounter_id: str) -> Encounter | None:
        return self.encounters.get(encounter_id)
