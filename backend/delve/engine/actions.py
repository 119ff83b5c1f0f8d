"""
Actions - named, dispatchable units of session-mutating logic.

Every action runs through the same three steps:

    pre-process -> process (the action body) -> post-process

The post-process step re-renders the *current* scene and publishes it on
the broadcast bus. It runs exactly once per ``run()`` call, even when the
body raises.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

ActionBody = Callable[[], Awaitable[None]]
StatePublisher = Callable[[], None]


async def _noop() -> None:
    return None


class Action:
    """A named action offered to the player.

    Actions are immutable once built and are discarded whenever the set of
    legal actions changes. ``name`` is also the dispatch key used by the
    transport layer, so two actions offered at the same time must not
    share a name.

    Example:
        >>> action = Action("Approach", approach_body, session.publish_state)
        >>> await action.run()
    """

    def __init__(
        self,
        name: str,
        process: ActionBody | None = None,
        publish: StatePublisher | None = None,
    ):
        """Create an action.

        Args:
            name: Display name and dispatch key
            process: Async body executed by ``run()``
            publish: Callback that renders the current state and publishes it
        """
        self.name = name
        self._process = process or _noop
        self._publish = publish

    def __repr__(self) -> str:
        return f"Action({self.name!r})"

    async def _pre_process(self) -> None:
        # Reserved extension point
        logger.debug(f"Executing pre-process for action: {self.name}")

    def _post_process(self) -> None:
        logger.debug(f"Executing post-process for action: {self.name}")
        if self._publish is not None:
            self._publish()

    async def run(self) -> None:
        """Run pre-process, the body and post-process, in that order.

        A failing body is logged and re-raised to the caller after the
        post-process has published the resulting state.
        """
        logger.debug(f"Running action: {self.name}")
        await self._pre_process()
        try:
            await self._process()
        except Exception:
            logger.exception(f"Action '{self.name}' failed")
            raise
        finally:
            self._post_process()
        logger.debug(f"Action completed: {self.name}")


def unique_name(base: str, taken: set[str]) -> str:
    """Return ``base`` or a numbered variant that is not in ``taken``."""
    if base not in taken:
        return base
    counter = 2
    while f"{base} ({counter})" in taken:
        counter += 1
    return f"{base} ({counter})"
