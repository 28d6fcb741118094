"""History pool: in-memory conversation history keyed by conversation id.

Each entry holds the turns of one conversation and the time it was last
used. Entries are created lazily and cleared when a conversation has been
idle for longer than the forget time. Nothing is persisted; history lives
as long as the process.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable

import structlog

from chatllm.core.types import Turn

logger = structlog.get_logger()

# Default inactivity before a conversation is forgotten (1 hour)
DEFAULT_FORGET_TIME_MS = 60 * 60 * 1000


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000


@dataclass
class HistoryEntry:
    """State attached to one conversation id."""

    history: list[Turn] = field(default_factory=list)
    last_accessed: float = 0.0  # milliseconds, from the pool's clock


class HistoryPool:
    """Keyed store of conversation histories with forget-time eviction.

    Eviction is lazy: an entry's history is only cleared when the entry is
    touched again. Call :meth:`sweep` to drop idle entries entirely.

    Callers that read, call a backend and then append must hold
    :meth:`lock` for the conversation id so concurrent requests on the
    same conversation do not interleave.
    """

    def __init__(
        self,
        forget_time: int = DEFAULT_FORGET_TIME_MS,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        """Initialize the pool.

        Args:
            forget_time: Milliseconds of inactivity after which history resets.
            clock: Millisecond clock; injectable for tests.
        """
        self.forget_time = forget_time
        self._clock = clock
        self._entries: dict[str, HistoryEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._entries

    def lock(self, conversation_id: str) -> asyncio.Lock:
        """Get or create the per-conversation lock."""
        if conversation_id not in self._locks:
            self._locks[conversation_id] = asyncio.Lock()
        return self._locks[conversation_id]

    def _lock_idle(self, conversation_id: str) -> bool:
        """True if no task holds or waits on the conversation's lock.

        A released lock reads as unlocked while the waiter it woke has not
        run yet, so pending waiters must be checked too.
        """
        lock = self._locks.get(conversation_id)
        if lock is None:
            return True
        return not lock.locked() and not getattr(lock, "_waiters", None)

    def get(self, conversation_id: str) -> HistoryEntry | None:
        return self._entries.get(conversation_id)

    def get_or_create(self, conversation_id: str) -> HistoryEntry:
        """Return the entry for ``conversation_id``, creating an empty one.

        An existing entry is returned as-is; its access time only moves
        when it is touched.
        """
        entry = self._entries.get(conversation_id)
        if entry is None:
            entry = HistoryEntry(last_accessed=self._clock())
            self._entries[conversation_id] = entry
            logger.debug("history_created", conversation_id=conversation_id)
        return entry

    def touch(self, entry: HistoryEntry) -> HistoryEntry:
        """Mark the entry used, clearing its history if it sat idle too long."""
        now = self._clock()
        if now - entry.last_accessed >= self.forget_time and entry.history:
            logger.info(
                "history_forgotten",
                turns=len(entry.history),
                idle_ms=int(now - entry.last_accessed),
            )
            entry.history = []
        entry.last_accessed = now
        return entry

    def append(self, entry: HistoryEntry, turn: Turn) -> None:
        entry.history.append(turn)

    def forget(self, conversation_id: str) -> bool:
        """Remove a conversation entirely. Returns True if it existed."""
        entry = self._entries.pop(conversation_id, None)
        if self._lock_idle(conversation_id):
            self._locks.pop(conversation_id, None)
        if entry is not None:
            logger.info("history_deleted", conversation_id=conversation_id)
        return entry is not None

    def sweep(self) -> int:
        """Delete every entry idle for at least the forget time.

        Entries whose lock is held or awaited are skipped. Returns the
        number of entries removed.
        """
        now = self._clock()
        idle = [
            cid for cid, entry in self._entries.items()
            if now - entry.last_accessed >= self.forget_time
            and self._lock_idle(cid)
        ]
        for cid in idle:
            del self._entries[cid]
            self._locks.pop(cid, None)

        if idle:
            logger.info("history_swept", removed=len(idle), remaining=len(self._entries))
        return len(idle)
