from __future__ import annotations

from asyncio import Lock
from typing import Any, Optional

from .config import UNDO_HISTORY_LIMIT
from .scoring.volleyball import push_snapshot


class UndoHistory:
    """In-memory undo stacks, one per game, with async-safe access.

    Stacks are immutable tuples of snapshots (oldest first). Every operation
    reads and replaces a stack while holding the lock, so overlapping requests
    never lose a snapshot. Stacks live for the lifetime of the process and are
    never persisted.
    """

    def __init__(self, limit: int = UNDO_HISTORY_LIMIT) -> None:
        self.limit = limit
        self._lock = Lock()
        self._store: dict[str, tuple[dict[str, Any], ...]] = {}

    async def push(self, game_id: str, snap: dict[str, Any]) -> int:
        """Put ``snap`` on top of the game's stack and return the new depth."""

        async with self._lock:
            stack = push_snapshot(self._store.get(game_id, ()), snap, self.limit)
            self._store[game_id] = stack
            return len(stack)

    async def pop(self, game_id: str) -> Optional[dict[str, Any]]:
        """Remove and return the most recent snapshot, or ``None`` when empty."""

        async with self._lock:
            stack = self._store.get(game_id, ())
            if not stack:
                return None
            if len(stack) == 1:
                del self._store[game_id]
            else:
                self._store[game_id] = stack[:-1]
            return stack[-1]

    async def depth(self, game_id: str) -> int:
        async with self._lock:
            return len(self._store.get(game_id, ()))

    async def invalidate(self, game_id: str) -> None:
        async with self._lock:
            self._store.pop(game_id, None)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()


undo_history = UndoHistory()


def get_undo_history() -> UndoHistory:
    """FastAPI dependency returning the process-wide undo history."""

    return undo_history
