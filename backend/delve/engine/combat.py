"""
Combat scene - the turn-based state machine.

Turn phases, driven by the character at ``current_turn_index``:

    FriendlyChoosing  -> "Select <enemy>" for every living enemy
    FriendlyTargeted  -> "Attack <enemy>" plus every selection action
    EnemyActing       -> no player actions, an enemy turn job is spawned
    Idle              -> turn order is empty or combat has an outcome

Every mutating step follows the same idiom: mutate, then render and
publish the current state through the ``publish`` callback.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Awaitable, Callable

from delve.engine.actions import Action, StatePublisher, unique_name
from delve.engine.character import Character
from delve.engine.scene import Scene

logger = logging.getLogger(__name__)

# Seconds the enemy "thinks" before acting
THINKING_DELAY = 2.0
# Seconds the hit marker stays up; outlasts the ~500ms client animation
HIT_DELAY = 0.6

Job = Callable[[], Awaitable[None]]
Spawner = Callable[[Job], None]


class CombatOutcome(str, Enum):
    """How a combat ended."""

    VICTORY = "victory"
    DEFEAT = "defeat"


OUTCOME_TEXT = {
    CombatOutcome.VICTORY: "All enemies have been defeated. Victory!",
    CombatOutcome.DEFEAT: "The party has fallen...",
}


@dataclass
class CombatSceneState:
    """Scene state carrying the combat participants and turn bookkeeping.

    Attributes:
        characters: All living combat participants
        selected_enemy_index: Index into ``enemies()``, not into ``characters``
        turn_order: Permutation of ``characters`` fixed at combat start
        current_turn_index: Index into ``turn_order``; meaningless when empty
        recently_attacked: Hit marker for the renderer, cleared after one cycle
        outcome: Set once one side has no living members
    """

    output_text: str = ""
    actions: list[Action] = field(default_factory=list)
    show_cursor: bool = False
    characters: list[Character] = field(default_factory=list)
    selected_enemy_index: int | None = None
    turn_order: list[Character] = field(default_factory=list)
    current_turn_index: int = 0
    recently_attacked: Character | None = None
    outcome: CombatOutcome | None = None

    def enemies(self) -> list[Character]:
        return [c for c in self.characters if c.is_enemy]

    def friendlies(self) -> list[Character]:
        return [c for c in self.characters if not c.is_enemy]

    def add_character(self, character: Character) -> None:
        logger.debug(f"Adding character: {character.name}")
        self.characters.append(character)

    def remove_character(self, character: Character) -> None:
        """Remove a character from ``characters`` and ``turn_order``.

        The turn index is left where it is and only clamped back to 0 when
        it runs past the end, so removing an earlier entry hands the slot to
        whoever moved into it. A removed target clears the enemy selection;
        any other removal re-points the selection at the same enemy.
        """
        logger.debug(f"Removing character: {character.name}")
        selected = self.selected_enemy()

        if character in self.characters:
            self.characters.remove(character)

        if character in self.turn_order:
            self.turn_order.remove(character)

        if self.turn_order and self.current_turn_index >= len(self.turn_order):
            logger.debug(
                f"Clamping current_turn_index {self.current_turn_index} to 0 "
                f"(turn order size {len(self.turn_order)})"
            )
            self.current_turn_index = 0

        if selected is character:
            self.selected_enemy_index = None
        elif selected is not None:
            self.selected_enemy_index = self.enemies().index(selected)

    def selected_enemy(self) -> Character | None:
        enemies = self.enemies()
        index = self.selected_enemy_index
        if index is not None and 0 <= index < len(enemies):
            return enemies[index]
        return None

    def current_character(self) -> Character | None:
        """The character whose turn it is, or None when the order is empty."""
        if self.turn_order and 0 <= self.current_turn_index < len(self.turn_order):
            return self.turn_order[self.current_turn_index]
        return None

    def advance_turn(self) -> None:
        if not self.turn_order:
            logger.debug("Cannot advance turn, turn order is empty")
            return
        self.current_turn_index = (self.current_turn_index + 1) % len(self.turn_order)
        logger.debug(f"Advanced to turn index {self.current_turn_index}")

    def resolve_outcome(self) -> CombatOutcome | None:
        """Return the outcome once a side has no living members."""
        if not self.characters:
            return None
        if not self.friendlies():
            return CombatOutcome.DEFEAT
        if not self.enemies():
            return CombatOutcome.VICTORY
        return None


class CombatScene(Scene):
    """Turn-based combat between enemies and the player's party.

    Enemy turns run as background jobs handed to ``spawn``. A session
    passes its own serialized job queue; without one, jobs are detached
    tasks on the running event loop.

    Example:
        >>> scene = CombatScene(session.publish_state, spawn=session.submit)
        >>> scene.initialize(enemies, adventure.state.friendly_characters)
    """

    kind = "combat"

    def __init__(
        self,
        publish: StatePublisher,
        *,
        spawn: Spawner | None = None,
        rng: random.Random | None = None,
        thinking_delay: float = THINKING_DELAY,
        hit_delay: float = HIT_DELAY,
        name: str = "combat",
        state: CombatSceneState | None = None,
    ):
        super().__init__(state if state is not None else CombatSceneState(), name)
        self.state: CombatSceneState
        self._publish = publish
        self._spawn = spawn or self._spawn_detached
        self._rng = rng or random.Random()
        self.thinking_delay = thinking_delay
        self.hit_delay = hit_delay
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self, enemies: list[Character], friendlies: list[Character]) -> None:
        """Start combat with a freshly shuffled turn order.

        Defeated characters do not join. The friendly list is copied, so
        removing a friendly during combat leaves the caller's roster intact.
        """
        logger.info(
            f"Initializing combat with {len(enemies)} enemies and {len(friendlies)} friendlies"
        )
        state = self.state
        state.characters = [c for c in [*enemies, *friendlies] if not c.is_defeated]

        turn_order = list(state.characters)
        self._rng.shuffle(turn_order)
        state.turn_order = turn_order
        state.current_turn_index = 0
        state.selected_enemy_index = None
        state.recently_attacked = None
        state.outcome = None
        state.show_cursor = False

        current = state.current_character()
        if current is not None:
            state.output_text = f"Combat has begun! {current.name}'s turn."
        else:
            state.output_text = "Combat has begun!"

        self.update_actions()
        self._publish()

    def add_reinforcement(self, character: Character) -> None:
        """Bring a new enemy into the fight at the end of the turn order."""
        state = self.state
        state.add_character(character)
        state.turn_order.append(character)
        state.output_text += f"\nA new enemy appears: {character.name}!"

        if state.outcome is not None and state.resolve_outcome() is None:
            logger.info("Reinforcement arrived, combat resumes")
            state.outcome = None
        self.update_actions()

    # ------------------------------------------------------------------
    # Action generation
    # ------------------------------------------------------------------

    def update_actions(self) -> None:
        """Recompute the offered actions for the current actor.

        When the current actor is an enemy, this spawns its turn job
        instead of offering player actions.
        """
        state = self.state
        current = state.current_character()
        actions: list[Action] = []

        if state.outcome is not None:
            logger.debug(f"Combat over ({state.outcome.value}), no actions")
        elif current is None:
            logger.debug("No current character, no actions")
        elif current.is_enemy:
            logger.debug(f"Enemy turn for {current.name}, spawning turn job")
            self._spawn(partial(self.take_enemy_turn, current))
        else:
            taken: set[str] = set()

            selected = state.selected_enemy()
            if selected is not None:
                name = unique_name(f"Attack {selected.name}", taken)
                taken.add(name)
                actions.append(Action(name, self.attack_selected, self._publish))

            for index, enemy in enumerate(state.enemies()):
                name = unique_name(f"Select {enemy.name}", taken)
                taken.add(name)
                actions.append(
                    Action(name, partial(self._select_action, index), self._publish)
                )

        logger.debug(f"Offering {len(actions)} action(s)")
        state.actions = actions

    async def _select_action(self, index: int) -> None:
        self.select_enemy(index)

    # ------------------------------------------------------------------
    # Friendly turn
    # ------------------------------------------------------------------

    def select_enemy(self, index: int) -> bool:
        """Target the enemy at ``index`` in the enemy view.

        Returns:
            False (and changes nothing) if the index is out of range or it
            is not a friendly's turn
        """
        state = self.state
        current = state.current_character()
        if current is None or current.is_enemy:
            logger.warning(f"Ignoring enemy selection {index}: not a friendly turn")
            return False

        enemies = state.enemies()
        if not 0 <= index < len(enemies):
            logger.warning(
                f"Ignoring enemy selection {index}: {len(enemies)} enemies available"
            )
            return False

        enemy = enemies[index]
        logger.debug(f"Selected enemy: {enemy.name} at index {index}")
        state.selected_enemy_index = index
        state.output_text = f"{enemy.name} selected as target."
        self.update_actions()
        self._publish()
        return True

    async def attack_selected(self) -> None:
        """The current friendly attacks the selected enemy, then the turn ends."""
        state = self.state
        attacker = state.current_character()
        target = state.selected_enemy()
        if attacker is None or attacker.is_enemy or target is None:
            logger.warning("Attack ignored: no friendly attacker or no selected target")
            return

        self._strike(attacker, target)
        state.selected_enemy_index = None
        await self.end_turn()

    def _strike(self, attacker: Character, target: Character) -> None:
        state = self.state
        target.take_damage(attacker.attack)
        state.recently_attacked = target
        logger.debug(
            f"{attacker.name} attacks {target.name} for {attacker.attack} damage, "
            f"health now {target.health}"
        )
        state.output_text = f"{attacker.name} attacks {target.name} for {attacker.attack} damage!"

        if target.is_defeated:
            logger.info(f"{target.name} has been defeated")
            state.output_text += f"\n{target.name} has been defeated!"
            state.remove_character(target)

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    async def end_turn(self) -> None:
        """Play the hit animation if any, then hand the turn to the next actor."""
        state = self.state

        if state.recently_attacked is not None:
            # Let viewers render the hit before the marker is cleared
            self._publish()
            await asyncio.sleep(self.hit_delay)
            state.recently_attacked = None

        state.advance_turn()

        outcome = state.resolve_outcome()
        next_character = state.current_character()
        if outcome is not None and state.outcome is None:
            logger.info(f"Combat ended: {outcome.value}")
            state.outcome = outcome
            state.output_text += f"\n{OUTCOME_TEXT[outcome]}"
        elif state.outcome is None and next_character is not None:
            logger.debug(f"Next character's turn: {next_character.name}")
            state.output_text += f"\nIt's now {next_character.name}'s turn."

        self.update_actions()
        self._publish()

    async def take_enemy_turn(self, enemy: Character) -> None:
        """Autonomous enemy turn: think, pick a random living friendly, strike."""
        state = self.state
        if state.current_character() is not enemy or state.outcome is not None:
            logger.debug(f"Skipping stale enemy turn for {enemy.name}")
            return

        if not state.friendlies():
            logger.debug("No friendlies left, ending enemy turn without acting")
            await self.end_turn()
            return

        state.show_cursor = True
        state.output_text = f"{enemy.name} is thinking..."
        self._publish()
        await asyncio.sleep(self.thinking_delay)
        state.show_cursor = False

        friendlies = state.friendlies()
        if friendlies:
            target = self._rng.choice(friendlies)
            self._strike(enemy, target)
        await self.end_turn()

    # ------------------------------------------------------------------
    # Detached jobs (no session)
    # ------------------------------------------------------------------

    def _spawn_detached(self, job: Job) -> None:
        task = asyncio.get_running_loop().create_task(job())
        self._tasks.add(task)
        task.add_done_callback(self._job_done)

    def _job_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Enemy turn failed", exc_info=task.exception())
