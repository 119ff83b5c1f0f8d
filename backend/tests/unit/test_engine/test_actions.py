"""Unit tests for Action execution and naming.

Tests cover:
- pre-process, process and post-process run in order
- post-process publishes even when the body raises
- unique names for colliding action labels
"""

import pytest

from delve.engine.actions import Action, unique_name


class RecordingAction(Action):
    """Action that records its pre-process step."""

    def __init__(self, events: list[str], *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.events = events

    async def _pre_process(self) -> None:
        self.events.append("pre")
        await super()._pre_process()


class TestActionRun:
    """Tests for Action.run()."""

    @pytest.mark.asyncio
    async def test_steps_run_in_order(self) -> None:
        """Pre-process, then the body, then exactly one publish."""
        events: list[str] = []

        async def body() -> None:
            events.append("process")

        action = RecordingAction(events, "Approach", body, lambda: events.append("publish"))
        await action.run()

        assert events == ["pre", "process", "publish"]

    @pytest.mark.asyncio
    async def test_publishes_when_body_raises(self) -> None:
        """A failing body still publishes once and the error propagates."""
        publishes: list[str] = []

        async def body() -> None:
            raise RuntimeError("boom")

        action = Action("Broken", body, lambda: publishes.append("publish"))

        with pytest.raises(RuntimeError, match="boom"):
            await action.run()

        assert publishes == ["publish"]

    @pytest.mark.asyncio
    async def test_runs_without_body_or_publisher(self) -> None:
        """Body and publisher are optional."""
        await Action("Wait").run()

    @pytest.mark.asyncio
    async def test_each_run_publishes(self) -> None:
        publishes: list[str] = []
        action = Action("Look", publish=lambda: publishes.append("publish"))

        await action.run()
        await action.run()

        assert len(publishes) == 2

    def test_repr_shows_name(self) -> None:
        assert repr(Action("Select Goblin")) == "Action('Select Goblin')"


class TestUniqueName:
    """Tests for unique_name()."""

    def test_free_name_is_kept(self) -> None:
        assert unique_name("Select Goblin", set()) == "Select Goblin"

    def test_colliding_name_is_numbered(self) -> None:
        assert unique_name("Select Goblin", {"Select Goblin"}) == "Select Goblin (2)"

    def test_numbering_skips_taken_numbers(self) -> None:
        taken = {"Select Goblin", "Select Goblin (2)"}
        assert unique_name("Select Goblin", taken) == "Select Goblin (3)"
