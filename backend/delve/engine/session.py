"""
Game session - the single mutable session shared by every viewer.

All state transitions go through one single-flight lock: player
commands (``perform``), admin commands and enemy turns (``submit``) each
run to completion before the next one starts, in the order they reach
the lock. An enemy turn is therefore just another queued command and can
never race a player command.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from typing import Awaitable, Callable

from delve import config
from delve.engine.actions import Action
from delve.engine.adventure import Adventure, AdventureState, NarrativeScene
from delve.engine.broadcast import BroadcastBus
from delve.engine.combat import CombatScene
from delve.engine.errors import ActionNotFoundError, ContentError
from delve.engine.scene import Scene, SceneState
from delve.models.adventure import AdventureContent
from delve.render import render_snapshot

logger = logging.getLogger(__name__)

Renderer = Callable[[AdventureState, SceneState], str]
Job = Callable[[], Awaitable[None]]

HEAL_AMOUNT = 20


class GameSession:
    """Owns the adventure, the current scene and the broadcast bus.

    Attributes:
        session_id: Unique identifier for this session
        content: Adventure definition the session was built from
        adventure: Session-scoped adventure state
        current_scene: The scene driving the screen
        bus: Broadcast bus viewers subscribe to

    Example:
        >>> session = GameSession(content)
        >>> await session.perform("START")
        >>> session.current_scene.state.output_text
    """

    def __init__(
        self,
        content: AdventureContent,
        *,
        render: Renderer = render_snapshot,
        bus: BroadcastBus | None = None,
        rng: random.Random | None = None,
        thinking_delay: float | None = None,
        hit_delay: float | None = None,
    ):
        self.session_id = str(uuid.uuid4())
        self.content = content
        self.render = render
        self.bus = bus if bus is not None else BroadcastBus(config.get_broadcast_buffer())
        self.rng = rng or random.Random()
        self.thinking_delay = (
            thinking_delay if thinking_delay is not None else config.get_thinking_delay()
        )
        self.hit_delay = hit_delay if hit_delay is not None else config.get_hit_delay()

        self._lock = asyncio.Lock()
        self._jobs: set[asyncio.Task] = set()

        self._build()

    def _build(self) -> None:
        """(Re)create the adventure and show the opening beat."""
        roster = [spec.build(is_enemy=False) for spec in self.content.party]
        self.adventure = Adventure(
            self.content.title, AdventureState(friendly_characters=roster)
        )
        self.narrative = NarrativeScene(self.content, self)
        self.adventure.state.actions = self.narrative.build_actions(
            self.content.global_choices
        )
        self.narrative.show_beat(self.content.opening)
        self.current_scene: Scene = self.narrative
        logger.info(f"Session {self.session_id} ready: {self.content.title}")

    # ------------------------------------------------------------------
    # Render + publish
    # ------------------------------------------------------------------

    def snapshot(self) -> str:
        """Render the current adventure and scene state."""
        return self.render(self.adventure.state, self.current_scene.state)

    def publish_state(self) -> None:
        """Render the current state and publish it to every viewer."""
        self.bus.publish(self.snapshot())
        logger.debug(f"Published state of scene {self.current_scene.name}")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def dispatch(self, action_name: str) -> Action | None:
        """Find the offered action called ``action_name``.

        Scene actions are searched first, then the adventure-wide actions.
        """
        action = self.current_scene.find_action(action_name)
        if action is not None:
            return action
        for action in self.adventure.state.actions:
            if action.name == action_name:
                return action
        return None

    async def perform(self, action_name: str) -> None:
        """Dispatch and run an action under the session lock.

        Raises:
            ActionNotFoundError: If no action with that name is offered
        """
        async with self._lock:
            action = self.dispatch(action_name)
            if action is None:
                logger.info(f"Action not found: {action_name}")
                raise ActionNotFoundError(action_name)
            await action.run()

    def submit(self, job: Job, owner: Scene | None = None) -> None:
        """Queue a background job behind every command already waiting.

        A job with an ``owner`` scene is skipped if that scene is no longer
        current by the time the job reaches the lock.
        """
        task = asyncio.get_running_loop().create_task(self._run_job(job, owner))
        self._jobs.add(task)
        task.add_done_callback(self._jobs.discard)

    async def _run_job(self, job: Job, owner: Scene | None) -> None:
        async with self._lock:
            if owner is not None and owner is not self.current_scene:
                logger.info(f"Skipping job of inactive scene {owner.name}")
                return
            try:
                await job()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Background job failed")
                # Keep viewers consistent with whatever state the job left
                self.publish_state()

    @property
    def pending_jobs(self) -> int:
        return len(self._jobs)

    async def drain(self) -> None:
        """Wait until no background jobs remain, including ones they spawn."""
        while self._jobs:
            await asyncio.gather(*list(self._jobs), return_exceptions=True)

    # ------------------------------------------------------------------
    # Scenes
    # ------------------------------------------------------------------

    def change_scene(self, scene: Scene) -> None:
        """Make ``scene`` current; the previous scene keeps its state.

        Queued enemy turns of the previous scene are skipped. Re-entering a
        combat scene picks its turn up where it was left.
        """
        if scene is self.current_scene:
            return
        logger.info(f"Scene change: {self.current_scene.name} -> {scene.name}")
        self.current_scene = scene
        if isinstance(scene, CombatScene) and scene.state.turn_order:
            scene.update_actions()

    def start_combat(self, encounter_id: str) -> CombatScene:
        """Switch to combat against an encounter's enemies and the roster."""
        encounter = self.content.get_encounter(encounter_id)
        if encounter is None:
            raise ContentError(f"Unknown encounter '{encounter_id}'")

        scene = CombatScene(
            self.publish_state,
            spawn=lambda job: self.submit(job, owner=scene),
            rng=self.rng,
            thinking_delay=self.thinking_delay,
            hit_delay=self.hit_delay,
            name=f"combat:{encounter_id}",
        )
        self.change_scene(scene)
        enemies = [spec.build(is_enemy=True) for spec in encounter.enemies]
        scene.initialize(enemies, self.adventure.state.friendly_characters)
        return scene

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def reset(self) -> None:
        """Cancel pending jobs and restart the adventure from the opening beat."""
        await self._cancel_jobs()
        async with self._lock:
            logger.info("Resetting game")
            # Drop jobs queued while we waited for the lock
            await self._cancel_jobs()
            self._build()
            self.publish_state()

    async def heal_party(self, amount: int = HEAL_AMOUNT) -> None:
        """Add health to every friendly in the roster."""
        async with self._lock:
            for character in self.adventure.state.friendly_characters:
                character.health += amount
                logger.debug(f"Healed {character.name} by {amount}, now {character.health}")
            self.publish_state()

    async def add_reinforcement(self) -> bool:
        """Add an enemy to the running combat.

        Returns:
            False when the current scene is not a combat scene
        """
        async with self._lock:
            scene = self.current_scene
            if not isinstance(scene, CombatScene):
                logger.info("Not in combat, cannot add enemy")
                self.publish_state()
                return False

            enemy = self.content.reinforcement.build(is_enemy=True)
            logger.info(f"Adding reinforcement: {enemy.name}")
            scene.add_reinforcement(enemy)
            self.publish_state()
            return True

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def _cancel_jobs(self) -> None:
        jobs = list(self._jobs)
        for task in jobs:
            task.cancel()
        if jobs:
            await asyncio.gather(*jobs, return_exceptions=True)
            logger.debug(f"Cancelled {len(jobs)} background job(s)")

    async def close(self) -> None:
        """Cancel background jobs and close the broadcast bus."""
        await self._cancel_jobs()
        self.bus.close()
        logger.info(f"Session {self.session_id} closed")
