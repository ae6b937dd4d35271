"""Single-session undo stack for ratings."""

import logging

from cadence.domain.models import ReviewSnapshot

logger = logging.getLogger(__name__)


class ReviewUndoStack:
    """
    LIFO stack of ReviewSnapshot, one per applied rating.

    Depth is bounded only by the session; `clear()` runs at session end.
    """

    def __init__(self):
        self._stack: list[ReviewSnapshot] = []

    def push(self, snapshot: ReviewSnapshot) -> None:
        self._stack.append(snapshot)
        logger.debug(f"Saved undo snapshot for card {snapshot.card_id}, depth {len(self._stack)}")

    def undo(self) -> ReviewSnapshot | None:
        """Pop the most recent snapshot, or return None if there is nothing to undo."""
        if not self._stack:
            return None
        snapshot = self._stack.pop()
        logger.debug(f"Popped undo snapshot for card {snapshot.card_id}, depth {len(self._stack)}")
        return snapshot

    def can_undo(self) -> bool:
        return bool(self._stack)

    def clear(self) -> None:
        dropped = len(self._stack)
        self._stack.clear()
        logger.debug(f"Cleared undo stack, dropped {dropped} snapshot(s)")

    def __len__(self) -> int:
        return len(self._stack)

    def describe(self) -> list[dict]:
        """Oldest-first summary of the stack for diagnostics."""
        return [
            {
                "card_id": s.card_id,
                "rating": s.rating.name,
                "applied_at": s.applied_at.isoformat(),
            }
            for s in self._stack
        ]
