"""
Combat participant record.
"""

from dataclasses import dataclass


@dataclass(eq=False)
class Character:
    """A mutable combat participant.

    Identity is by reference: two characters may share a name and still be
    distinct participants, so equality falls back to ``is``.

    Health is never clamped. A character with ``health <= 0`` is defeated
    and may read negative until it is removed from combat.
    """

    name: str
    is_enemy: bool
    health: int
    attack: int

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def take_damage(self, amount: int) -> int:
        """Subtract ``amount`` from health and return the new value."""
        self.health -= amount
        return self.health
