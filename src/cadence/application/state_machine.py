"""
Review state machine.

Composes the memory model with the learning step scheduler:
1. The memory model always runs first (stability, difficulty, retrievability, log).
2. The step scheduler overrides due date, interval and state for any card
   that was not in Review before the rating.
3. Counters and history are updated from the prior card, not the model.
"""

import logging
from dataclasses import replace
from datetime import datetime

from cadence.domain.models import (
    Card,
    CardState,
    MemorySnapshot,
    Rating,
    SessionStepState,
    StepLadderConfig,
    ensure_utc,
    utc_now,
)
from cadence.domain.ports import MemoryModel

from .learning_steps import LearningStepScheduler, StepDecision, to_whole_ms

logger = logging.getLogger(__name__)


class ReviewStateMachine:
    """
    Moves cards through New -> Learning -> Review <-> Relearning.

    Depends on the MemoryModel abstraction; any implementation that keeps
    reps/lapses monotonic and is deterministic can be plugged in.
    """

    def __init__(
        self,
        memory_model: MemoryModel,
        step_scheduler: LearningStepScheduler | None = None,
    ):
        """
        Args:
            memory_model: The long-term memory algorithm (port).
            step_scheduler: Optional custom step scheduler; uses default if not provided.
        """
        self._model = memory_model
        self._steps = step_scheduler or LearningStepScheduler()

    @property
    def memory_model(self) -> MemoryModel:
        return self._model

    def apply_rating(
        self,
        card: Card,
        rating: Rating,
        config: StepLadderConfig,
        step_state: SessionStepState,
        now: datetime | None = None,
    ) -> Card:
        """
        Apply one rating and return the updated card.

        Writes the new step index into `step_state`. The input card is left
        untouched.

        Args:
            card: Card before the rating.
            rating: Recall quality.
            config: Ladder settings of the card's deck.
            step_state: The card's step position in the current session.
            now: Time of the rating; defaults to the current time.

        Returns:
            The card with updated memory state, history and counters.
        """
        now = to_whole_ms(ensure_utc(now) if now else utc_now())
        prior = card.memory

        proposed, log_entry = self._model.review(prior, rating, now)
        decision = self._override(prior.state, proposed.state, rating, config, step_state, now)

        memory = replace(
            proposed,
            reps=prior.reps + 1,
            lapses=prior.lapses + (1 if self.is_lapse(prior.state, rating) else 0),
            last_review=now,
        )
        if decision is not None:
            memory = replace(
                memory,
                due=decision.due,
                scheduled_days=decision.scheduled_days,
                state=decision.state,
            )
            step_state.step_index = decision.step_index
            log_entry = replace(log_entry, scheduled_days=decision.scheduled_days)

        logger.debug(
            f"Card {card.card_id}: {prior.state.name} --{rating.name}--> {memory.state.name} "
            f"(due {memory.due.isoformat()}, step {step_state.step_index})"
        )
        return replace(card, memory=memory, history=card.history + (log_entry,))

    def preview(
        self,
        card: Card,
        config: StepLadderConfig,
        step_state: SessionStepState,
        now: datetime | None = None,
    ) -> dict[Rating, MemorySnapshot]:
        """
        Outcome of every rating for `card`, without changing anything.

        Used to label rating buttons with their next interval.
        """
        now = to_whole_ms(ensure_utc(now) if now else utc_now())
        outcomes: dict[Rating, MemorySnapshot] = {}
        for rating in Rating:
            scratch = SessionStepState(step_state.card_id, step_state.step_index)
            outcomes[rating] = self.apply_rating(card, rating, config, scratch, now).memory
        return outcomes

    @staticmethod
    def is_lapse(prior_state: CardState, rating: Rating) -> bool:
        return prior_state == CardState.REVIEW and rating == Rating.AGAIN

    def _override(
        self,
        prior_state: CardState,
        proposed_state: CardState,
        rating: Rating,
        config: StepLadderConfig,
        step_state: SessionStepState,
        now: datetime,
    ) -> StepDecision | None:
        if prior_state != CardState.REVIEW:
            return self._steps.schedule(prior_state, rating, config, step_state.step_index, now)

        # A lapsed Review card: the model signals Relearning, the ladder owns the due date.
        if proposed_state == CardState.RELEARNING:
            return self._steps.enter_relearning(config, now)
        return None
