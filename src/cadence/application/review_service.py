"""
Review Session Service: application layer orchestrator.

Drives one study session: applies ratings through the state machine, keeps
the undo stack and step registry in sync, tracks statistics and hands every
result to the card store.
"""

import logging
from dataclasses import replace
from datetime import datetime

from cadence.domain.exceptions import PersistenceFailure
from cadence.domain.models import (
    Card,
    Rating,
    ReviewSnapshot,
    SessionStats,
    ensure_utc,
    utc_now,
)
from cadence.domain.ports import CardStore

from .deck_config import DeckConfigResolver
from .learning_steps import to_whole_ms
from .session import SessionStepRegistry
from .state_machine import ReviewStateMachine
from .stats import update_card_stats, update_session_stats
from .undo import ReviewUndoStack

logger = logging.getLogger(__name__)


class ReviewSession:
    """
    Application service for a single study session.

    Follows Dependency Inversion: depends on the CardStore and MemoryModel
    abstractions, not concrete adapters.
    """

    def __init__(
        self,
        state_machine: ReviewStateMachine,
        store: CardStore,
        deck_configs: DeckConfigResolver,
        registry: SessionStepRegistry | None = None,
        undo_stack: ReviewUndoStack | None = None,
        session_id: str | None = None,
    ):
        """
        Args:
            state_machine: Composed memory model + step scheduler.
            store: The storage collaborator (port).
            deck_configs: Per-deck ladder lookup with a global fallback.
            registry: Step registry shared by sessions; a private one if not provided.
            undo_stack: Optional custom undo stack.
            session_id: Explicit session ID; generated if not provided.
        """
        self._machine = state_machine
        self._store = store
        self._deck_configs = deck_configs
        self._registry = registry or SessionStepRegistry()
        self._undo = undo_stack or ReviewUndoStack()
        self.session_id = self._registry.open_session(session_id)
        self.stats = SessionStats()
        self._cards: dict[str, Card] = {}
        # Computed cards whose save failed, oldest first
        self._pending: dict[str, Card] = {}

    @property
    def registry(self) -> SessionStepRegistry:
        return self._registry

    @property
    def pending_card(self) -> Card | None:
        """Most recent card whose save failed, if any."""
        return next(reversed(self._pending.values()), None)

    @property
    def pending_saves(self) -> list[str]:
        return list(self._pending)

    def can_undo(self) -> bool:
        return self._undo.can_undo()

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def current(self, card_id: str) -> Card | None:
        """Latest version of a card rated in this session."""
        return self._cards.get(card_id)

    def rate(
        self,
        card: Card,
        rating: Rating,
        card_index: int = 0,
        response_time_ms: int = 0,
        now: datetime | None = None,
    ) -> Card:
        """
        Apply a rating, record it for undo and persist the result.

        Args:
            card: Card as it was presented.
            rating: Recall quality.
            card_index: Position of the card in the session queue.
            response_time_ms: Time the learner took to answer.
            now: Time of the rating; defaults to the current time.

        Returns:
            The updated card.

        Raises:
            PersistenceFailure: The store rejected the save. The computed card
                stays pending until `retry_save()` succeeds for it.
            SessionClosedError: The session has already ended.
        """
        now = to_whole_ms(ensure_utc(now) if now else utc_now())
        config = self._deck_configs.resolve(card.deck)

        snapshot = ReviewSnapshot(
            card_index=card_index,
            card_id=card.card_id,
            memory_before=card.memory,
            history_before=card.history,
            stats_before=card.stats,
            session_stats_before=self.stats,
            step_index_before=self._registry.peek_step(self.session_id, card.card_id),
            rating=rating,
            applied_at=now,
        )

        step_state = self._registry.step_state(self.session_id, card.card_id)
        updated = self._machine.apply_rating(card, rating, config, step_state, now)
        updated = replace(updated, stats=update_card_stats(card.stats, rating, response_time_ms))

        self.stats = update_session_stats(self.stats, card.memory.state, rating, response_time_ms)
        self._undo.push(snapshot)
        self._cards[card.card_id] = updated
        self._pending.pop(card.card_id, None)
        self._pending[card.card_id] = updated

        self._save(updated)
        del self._pending[card.card_id]
        return updated

    def retry_save(self, card_id: str | None = None) -> Card | None:
        """
        Re-attempt a save that failed, without recomputing the card.

        Args:
            card_id: Card to retry; the most recent failed save if omitted.

        Returns:
            The saved card, or None if nothing was pending for it.
        """
        if card_id is None:
            card = self.pending_card
        else:
            card = self._pending.get(card_id)
        if card is None:
            return None
        self._save(card)
        del self._pending[card.card_id]
        return card

    def undo(self) -> Card | None:
        """
        Revert the most recent rating of this session.

        Returns:
            The restored card, or None if there was nothing to undo.

        Raises:
            PersistenceFailure: The restored card could not be saved. The
                snapshot is pushed back so the undo can be attempted again.
        """
        snapshot = self._undo.undo()
        if snapshot is None:
            logger.info("Nothing to undo in this session")
            return None

        current = self._cards[snapshot.card_id]
        restored = replace(
            current,
            memory=snapshot.memory_before,
            history=snapshot.history_before,
            stats=snapshot.stats_before,
        )

        saved = False
        try:
            self._save(restored)
            saved = True
        finally:
            if not saved:
                self._undo.push(snapshot)

        self._cards[snapshot.card_id] = restored
        self.stats = snapshot.session_stats_before
        if snapshot.step_index_before is None:
            self._registry.forget(self.session_id, snapshot.card_id)
        else:
            self._registry.set_step(self.session_id, snapshot.card_id, snapshot.step_index_before)
        self._pending.pop(snapshot.card_id, None)

        logger.info(f"Undid {snapshot.rating.name} on card {snapshot.card_id}")
        return restored

    def end(self) -> SessionStats:
        """Close the session: drop undo history and step indices."""
        if self._pending:
            logger.warning(
                f"Session {self.session_id} ended with unsaved cards: {self.pending_saves}"
            )
        logger.debug(f"Discarding undo history: {self._undo.describe()}")
        self._undo.clear()
        self._registry.close_session(self.session_id)
        self._cards.clear()
        logger.info(
            f"Session {self.session_id} ended: {self.stats.cards_reviewed} reviewed, "
            f"{self.stats.correct_answers} correct"
        )
        return self.stats

    def _save(self, card: Card) -> None:
        if not self._store.save_card(card):
            logger.warning(f"Store rejected card {card.card_id}")
            raise PersistenceFailure(card.card_id)
