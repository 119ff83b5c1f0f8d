"""Scene, action and turn engine.

- Actions (`engine/actions.py`): named units of logic with guaranteed
  render + publish after they run.
- Scenes (`engine/scene.py`, `engine/adventure.py`, `engine/combat.py`):
  narrative beats and the turn-based combat state machine.
- Broadcast bus (`engine/broadcast.py`): fan-out of rendered snapshots.
- Session (`engine/session.py`): the single-flight owner of all of the above.

Import directly from submodules to avoid circular imports:
    from delve.engine.session import GameSession
    from delve.engine.combat import CombatScene, CombatSceneState
"""
