"""
Shared pytest fixtures for Dungeon Delve backend tests.

This module provides:
- sample_content: Small AdventureContent mirroring the default adventure
- FriendliesFirst: Deterministic stand-in for random.Random
- combat_scene: CombatScene with recorded publishes and spawned jobs
- session: GameSession with zero delays and deterministic turn order
- Custom markers for test categorization
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

# Add backend to path for imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from delve.engine.character import Character  # noqa: E402
from delve.engine.combat import CombatScene  # noqa: E402
from delve.engine.session import GameSession  # noqa: E402
from delve.models.adventure import AdventureContent  # noqa: E402

if TYPE_CHECKING:
    from tests.mocks.llm import MockLLMClient


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


# =============================================================================
# Determinism Helpers
# =============================================================================


class FriendliesFirst:
    """Stand-in for random.Random with a predictable turn order.

    ``shuffle`` puts friendlies before enemies (keeping relative order) and
    ``choice`` always returns the first candidate.
    """

    def shuffle(self, items: list[Character]) -> None:
        items.sort(key=lambda c: c.is_enemy)

    def choice(self, items: list[Character]) -> Character:
        return items[0]


class PublishRecorder:
    """Callable publish hook that counts calls and records what was shown."""

    def __init__(self) -> None:
        self.calls = 0
        self.texts: list[str] = []
        self.hits: list[Character | None] = []
        self.scene: CombatScene | None = None

    def __call__(self) -> None:
        self.calls += 1
        if self.scene is not None:
            self.texts.append(self.scene.state.output_text)
            self.hits.append(self.scene.state.recently_attacked)


# =============================================================================
# Adventure Fixtures
# =============================================================================


@pytest.fixture
def adventure_data() -> dict:
    """Raw adventure definition as it would come out of YAML."""
    return {
        "title": "Test Delve",
        "opening": "start",
        "party": [
            {"name": "Hero", "health": 100, "attack": 10},
            {"name": "Companion", "health": 75, "attack": 7},
        ],
        "beats": [
            {
                "id": "start",
                "text": "",
                "choices": [{"label": "START", "goto": "awakening"}],
            },
            {
                "id": "awakening",
                "text": "You awaken on a cold stone floor.\n",
                "show_cursor": True,
                "choices": [{"label": "Approach", "goto": "halt"}],
            },
            {
                "id": "halt",
                "text": '"Halt!"',
                "show_cursor": True,
                "choices": [{"label": "Enter Combat", "encounter": "guards"}],
            },
        ],
        "encounters": {
            "guards": {
                "name": "Pyramid Guards",
                "enemies": [
                    {"name": "Goblin", "health": 30, "attack": 5},
                    {"name": "Orc", "health": 50, "attack": 8},
                ],
            },
        },
    }


@pytest.fixture
def sample_content(adventure_data: dict) -> AdventureContent:
    """Validated content for the sample adventure."""
    return AdventureContent.model_validate(adventure_data)


# =============================================================================
# Combat Fixtures
# =============================================================================


@pytest.fixture
def hero() -> Character:
    return Character("Hero", is_enemy=False, health=100, attack=10)


@pytest.fixture
def companion() -> Character:
    return Character("Companion", is_enemy=False, health=75, attack=7)


@pytest.fixture
def goblin() -> Character:
    return Character("Goblin", is_enemy=True, health=30, attack=5)


@pytest.fixture
def orc() -> Character:
    return Character("Orc", is_enemy=True, health=50, attack=8)


@pytest.fixture
def friendlies_first() -> FriendliesFirst:
    return FriendliesFirst()


@pytest.fixture
def published() -> PublishRecorder:
    return PublishRecorder()


@pytest.fixture
def spawned() -> list:
    """Enemy turn jobs handed to the spawner, not run."""
    return []


@pytest.fixture
def combat_scene(published: PublishRecorder, spawned: list) -> CombatScene:
    """Combat scene with recorded publishes and jobs, no delays."""
    scene = CombatScene(
        published,
        spawn=spawned.append,
        rng=FriendliesFirst(),
        thinking_delay=0,
        hit_delay=0,
    )
    published.scene = scene
    return scene


@pytest.fixture
def started_combat(
    combat_scene: CombatScene,
    hero: Character,
    companion: Character,
    goblin: Character,
    orc: Character,
) -> CombatScene:
    """Combat initialized with turn order Hero, Companion, Goblin, Orc."""
    combat_scene.initialize([goblin, orc], [hero, companion])
    return combat_scene


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def session(sample_content: AdventureContent) -> GameSession:
    """Game session with zero delays and friendlies acting first."""
    return GameSession(
        sample_content,
        rng=FriendliesFirst(),
        thinking_delay=0,
        hit_delay=0,
    )


# =============================================================================
# LLM Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_llm_client() -> "MockLLMClient":
    """Create a mock LLM client with default responses."""
    from tests.mocks.llm import MockLLMClient

    return MockLLMClient(responses={"default": "Mwahaha! Test response."})


@pytest.fixture
def mock_llm_with_responses() -> callable:
    """Factory fixture to create mock LLM with custom responses.

    Usage:
        def test_something(mock_llm_with_responses):
            llm = mock_llm_with_responses({
                "desert": '{"scene": {...}, "points_of_interest": []}',
            })
    """
    from tests.mocks.llm import MockLLMClient

    def _factory(responses: dict[str, str]) -> MockLLMClient:
        return MockLLMClient(responses=responses)

    return _factory
