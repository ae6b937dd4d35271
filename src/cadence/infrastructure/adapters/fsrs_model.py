"""
FSRS Memory Model: infrastructure adapter for the `fsrs` library.

Implements MemoryModel by translating snapshots to `fsrs.Card` objects and
running them through a non-fuzzing `fsrs.Scheduler`, so identical inputs
always give identical outputs.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from fsrs import Card as FsrsCard
from fsrs import Rating as FsrsRating
from fsrs import Scheduler, State

from cadence.domain.constants import (
    DEFAULT_DESIRED_RETENTION,
    DEFAULT_MAXIMUM_INTERVAL,
    DIFFICULTY_MAX,
    DIFFICULTY_MIN,
    SECONDS_PER_DAY,
)
from cadence.domain.models import (
    CardState,
    MemorySnapshot,
    Rating,
    ReviewLogEntry,
    ensure_utc,
)
from cadence.domain.ports import MemoryModel

logger = logging.getLogger(__name__)

_FSRS_STATES = {
    CardState.LEARNING: State.Learning,
    CardState.REVIEW: State.Review,
    CardState.RELEARNING: State.Relearning,
}


class FsrsMemoryModel(MemoryModel):
    """
    FSRS memory model.

    Only stability, difficulty, retrievability and the proposed interval come
    from FSRS. `reps` is left as is; `lapses` grows only for Review + Again.
    """

    def __init__(
        self,
        desired_retention: float = DEFAULT_DESIRED_RETENTION,
        maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL,
        parameters: Sequence[float] | None = None,
    ):
        kwargs = {
            "desired_retention": desired_retention,
            "maximum_interval": maximum_interval,
            "enable_fuzzing": False,
        }
        if parameters is not None:
            kwargs["parameters"] = tuple(parameters)
        self._scheduler = Scheduler(**kwargs)

    def review(
        self, snapshot: MemorySnapshot, rating: Rating, now: datetime
    ) -> tuple[MemorySnapshot, ReviewLogEntry]:
        now = ensure_utc(now)
        elapsed_days = self._elapsed_days(snapshot, now)
        retrievability = self.retrievability(snapshot, now)

        reviewed, _ = self._scheduler.review_card(
            self._to_fsrs(snapshot, now), FsrsRating(int(rating)), review_datetime=now
        )

        due = ensure_utc(reviewed.due)
        scheduled_days = max(0.0, (due - now).total_seconds() / SECONDS_PER_DAY)
        lapsed = snapshot.state == CardState.REVIEW and rating == Rating.AGAIN

        result = replace(
            snapshot,
            due=due,
            stability=float(reviewed.stability or 0.0),
            difficulty=float(reviewed.difficulty or 0.0),
            elapsed_days=elapsed_days,
            scheduled_days=scheduled_days,
            lapses=snapshot.lapses + (1 if lapsed else 0),
            state=CardState(reviewed.state.value),
            last_review=now,
            retrievability=retrievability,
        )
        log_entry = ReviewLogEntry(
            rating=rating,
            timestamp=now,
            elapsed_days=elapsed_days,
            scheduled_days=scheduled_days,
            stability=result.stability,
            difficulty=result.difficulty,
        )
        logger.debug(
            f"FSRS {snapshot.state.name}+{rating.name}: S={result.stability:.3f} "
            f"D={result.difficulty:.3f} R={retrievability:.3f} -> {result.state.name}"
        )
        return result, log_entry

    def retrievability(self, snapshot: MemorySnapshot, now: datetime) -> float:
        if snapshot.last_review is None or snapshot.stability <= 0:
            return 1.0
        now = ensure_utc(now)
        return float(
            self._scheduler.get_card_retrievability(
                self._to_fsrs(snapshot, now), current_datetime=now
            )
        )

    @staticmethod
    def _elapsed_days(snapshot: MemorySnapshot, now: datetime) -> float:
        if snapshot.last_review is None:
            return 0.0
        delta = now - ensure_utc(snapshot.last_review)
        return max(0.0, delta.total_seconds() / SECONDS_PER_DAY)

    @staticmethod
    def _to_fsrs(snapshot: MemorySnapshot, now: datetime) -> FsrsCard:
        # card_id is irrelevant here; passing one skips fsrs' timestamp-based id
        if snapshot.state == CardState.NEW or snapshot.stability <= 0:
            return FsrsCard(card_id=0, due=now)

        state = _FSRS_STATES[snapshot.state]
        return FsrsCard(
            card_id=0,
            state=state,
            step=None if state == State.Review else 0,
            stability=snapshot.stability,
            difficulty=min(max(snapshot.difficulty, DIFFICULTY_MIN), DIFFICULTY_MAX),
            due=ensure_utc(snapshot.due),
            last_review=ensure_utc(snapshot.last_review) if snapshot.last_review else None,
        )
