"""
Learning step scheduler.

Owns the due date, interval and next state of a card while it is still on a
short-term step ladder (New, Learning, Relearning). The memory model's own
proposal for those fields is discarded for such cards; Review cards pass
through untouched.

Ladder rules:
1. Again resets to rung 0.
2. Hard repeats the current rung and advances the index, clamped to the last rung.
3. Good moves one rung up, graduating to Review past the last rung.
4. Easy graduates immediately.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from cadence.domain.constants import (
    MAX_INTERVAL_DAYS,
    MIN_GRADUATION_DAYS,
    MINUTES_PER_DAY,
    MS_PER_DAY,
    MS_PER_MINUTE,
)
from cadence.domain.models import CardState, Rating, StepLadderConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepDecision:
    """Authoritative scheduling fields for a card on a step ladder."""

    due: datetime
    scheduled_days: float
    state: CardState
    step_index: int


def to_whole_ms(moment: datetime) -> datetime:
    """Round up to the next whole millisecond."""
    remainder = moment.microsecond % 1000
    if remainder:
        return moment + timedelta(microseconds=1000 - remainder)
    return moment


def _offset(ms: float) -> timedelta:
    # Clamped to 0..MAX_INTERVAL_DAYS; NaN counts as 0
    if math.isnan(ms) or ms <= 0:
        return timedelta(0)
    return timedelta(milliseconds=round(min(ms, MAX_INTERVAL_DAYS * MS_PER_DAY)))


def minutes_from(now: datetime, minutes: float) -> datetime:
    """`now` plus a whole number of milliseconds; never earlier than `now`."""
    return to_whole_ms(now) + _offset(minutes * MS_PER_MINUTE)


def days_from(now: datetime, days: float) -> datetime:
    return to_whole_ms(now) + _offset(days * MS_PER_DAY)


def clamp_step(step_index: int, ladder: tuple[float, ...]) -> int:
    """Clamp an index into `ladder`. Always returns a valid position."""
    return min(max(step_index, 0), len(ladder) - 1)


class LearningStepScheduler:
    """
    Applies step ladders to cards that have not reached Review.

    Stateless; the step index is passed in and returned in the decision.
    """

    def schedule(
        self,
        prior_state: CardState,
        rating: Rating,
        config: StepLadderConfig,
        step_index: int,
        now: datetime,
    ) -> StepDecision | None:
        """
        Decide due date, interval and next state for one rating.

        Args:
            prior_state: State of the card before the rating.
            rating: Recall quality.
            config: Ladder settings of the card's deck.
            step_index: Current rung (0 if the card is unseen this session).
            now: Wall-clock time of the rating.

        Returns:
            The decision, or None for Review cards (memory model decides).
        """
        if prior_state == CardState.REVIEW:
            return None

        ladder = config.ladder_for(prior_state)
        current = clamp_step(step_index, ladder)
        on_ladder_state = (
            CardState.RELEARNING if prior_state == CardState.RELEARNING else CardState.LEARNING
        )

        if rating == Rating.AGAIN:
            decision = self._on_rung(ladder, 0, 0, on_ladder_state, now)
        elif rating == Rating.HARD:
            decision = self._on_rung(
                ladder, current, clamp_step(current + 1, ladder), on_ladder_state, now
            )
        elif rating == Rating.GOOD:
            next_index = current + 1
            if next_index < len(ladder):
                decision = self._on_rung(ladder, next_index, next_index, on_ladder_state, now)
            else:
                decision = self._graduate(config.graduating_interval_days, now)
        else:
            decision = self._graduate(config.easy_interval_days, now)

        logger.debug(
            f"Step ladder {prior_state.name}+{rating.name}: index {step_index} -> "
            f"{decision.step_index}, state {decision.state.name}, "
            f"{decision.scheduled_days:.4f} days"
        )
        return decision

    def enter_relearning(self, config: StepLadderConfig, now: datetime) -> StepDecision:
        """Place a lapsed Review card on the first relearning rung."""
        return self._on_rung(config.relearning_steps, 0, 0, CardState.RELEARNING, now)

    def _on_rung(
        self,
        ladder: tuple[float, ...],
        rung: int,
        next_index: int,
        state: CardState,
        now: datetime,
    ) -> StepDecision:
        minutes = ladder[rung]
        return StepDecision(
            due=minutes_from(now, minutes),
            scheduled_days=max(0.0, minutes / MINUTES_PER_DAY),
            state=state,
            step_index=next_index,
        )

    def _graduate(self, interval_days: float, now: datetime) -> StepDecision:
        days = max(MIN_GRADUATION_DAYS, interval_days)
        return StepDecision(
            due=days_from(now, days),
            scheduled_days=days,
            state=CardState.REVIEW,
            step_index=0,
        )
