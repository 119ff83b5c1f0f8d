"""
Broadcast bus - fan-out of rendered state snapshots to live viewers.

The bus keeps one bounded buffer shared by every subscriber. Publishing
never waits: when the buffer is full the oldest pending snapshot is
dropped, and a subscriber that fell behind skips straight to the oldest
snapshot still buffered. Subscribers only see snapshots published after
they subscribed (no replay).

Example:
    >>> bus = BroadcastBus(capacity=64)
    >>> subscription = bus.subscribe()
    >>> bus.publish("<snapshot>")
    >>> await anext(subscription)
    '<snapshot>'
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 64


class BroadcastBus:
    """Publish/subscribe channel of rendered-state strings."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("Broadcast capacity must be at least 1")
        self.capacity = capacity
        self._buffer: deque[tuple[int, str]] = deque(maxlen=capacity)
        self._next_seq = 0
        self._wakeup = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def published_count(self) -> int:
        """Total number of snapshots published so far."""
        return self._next_seq

    def publish(self, message: str) -> None:
        """Publish a snapshot to every current subscriber without blocking."""
        if self._closed:
            logger.debug("Publish on closed broadcast bus ignored")
            return

        if len(self._buffer) == self.capacity:
            dropped_seq, _ = self._buffer[0]
            logger.debug(f"Broadcast buffer full, dropping snapshot #{dropped_seq}")

        self._buffer.append((self._next_seq, message))
        self._next_seq += 1
        self._notify()

    def subscribe(self) -> "Subscription":
        """Start a subscription at the current end of the stream."""
        return Subscription(self, self._next_seq)

    def close(self) -> None:
        """Close the bus; active subscriptions finish once drained."""
        self._closed = True
        self._notify()

    def _notify(self) -> None:
        # Wake every waiter, then arm a fresh event for the next round
        self._wakeup.set()
        self._wakeup = asyncio.Event()

    def _read(self, cursor: int) -> tuple[int, str | None, int]:
        """Read the snapshot at ``cursor``.

        Returns:
            (next cursor, message or None if nothing new, number skipped)
        """
        if cursor >= self._next_seq:
            return cursor, None, 0

        oldest_seq = self._buffer[0][0]
        skipped = 0
        if cursor < oldest_seq:
            skipped = oldest_seq - cursor
            cursor = oldest_seq

        _, message = self._buffer[cursor - oldest_seq]
        return cursor + 1, message, skipped


class Subscription:
    """Lazy, per-subscriber async iterator over published snapshots."""

    def __init__(self, bus: BroadcastBus, cursor: int):
        self._bus = bus
        self._cursor = cursor
        self.dropped = 0

    def __aiter__(self) -> "Subscription":
        return self

    def read_nowait(self) -> str | None:
        """Return the next buffered snapshot, or None if there is none yet."""
        self._cursor, message, skipped = self._bus._read(self._cursor)
        if skipped:
            self.dropped += skipped
            logger.warning(f"Subscriber fell behind, skipped {skipped} snapshot(s)")
        return message

    async def __anext__(self) -> str:
        while True:
            message = self.read_nowait()
            if message is not None:
                return message
            if self._bus.closed:
                raise StopAsyncIteration
            await self._bus._wakeup.wait()
