"""
Domain models for the scheduling core.

These are pure data structures with no I/O or external dependencies.
Everything except SessionStepState is immutable; updates go through
dataclasses.replace.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from .constants import (
    DEFAULT_EASY_INTERVAL_DAYS,
    DEFAULT_GRADUATING_INTERVAL_DAYS,
    DEFAULT_LEARNING_STEPS,
    DEFAULT_RELEARNING_STEPS,
    MAX_INTERVAL_DAYS,
    MIN_GRADUATION_DAYS,
    MINUTES_PER_DAY,
)
from .exceptions import ConfigurationError


class Rating(IntEnum):
    """Learner's self-assessed recall quality."""

    AGAIN = 1  # Recall failed
    HARD = 2  # Recalled with serious effort
    GOOD = 3  # Recalled normally
    EASY = 4  # Recalled effortlessly


class CardState(IntEnum):
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


def ensure_utc(moment: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MemorySnapshot:
    """
    Memory state of a single card.

    Attributes:
        due: When the card should next be presented.
        stability: Days until recall probability drops to the target retention.
        difficulty: Card difficulty on a 0-10 scale (0 until first review).
        elapsed_days: Days between the previous review and the latest one.
        scheduled_days: Interval used to compute `due`, in days.
        reps: Total number of reviews. Never decreases.
        lapses: Number of times a Review card was forgotten. Never decreases.
        state: Position in the New/Learning/Review/Relearning cycle.
        last_review: Time of the latest review, None for a new card.
        retrievability: Recall probability at the time of the latest review.
    """

    due: datetime
    stability: float = 0.0
    difficulty: float = 0.0
    elapsed_days: float = 0.0
    scheduled_days: float = 0.0
    reps: int = 0
    lapses: int = 0
    state: CardState = CardState.NEW
    last_review: datetime | None = None
    retrievability: float = 1.0

    @classmethod
    def new(cls, now: datetime | None = None) -> "MemorySnapshot":
        return cls(due=ensure_utc(now) if now else utc_now())


@dataclass(frozen=True)
class ReviewLogEntry:
    """
    A single review log entry. Appended to a card's history and never changed.

    Attributes:
        rating: Button pressed.
        timestamp: Wall-clock time of the review.
        elapsed_days: Days since the previous review (0 for the first one).
        scheduled_days: Interval assigned by this review.
        stability: Stability after the review.
        difficulty: Difficulty after the review.
    """

    rating: Rating
    timestamp: datetime
    elapsed_days: float
    scheduled_days: float
    stability: float
    difficulty: float


@dataclass(frozen=True)
class CardStats:
    total_reviews: int = 0
    total_time_ms: int = 0
    average_time_ms: float = 0.0
    memory_rate: float = 0.0  # Share of reviews not rated Again


@dataclass(frozen=True)
class SessionStats:
    cards_reviewed: int = 0
    new_cards_learned: int = 0
    correct_answers: int = 0
    total_time_ms: int = 0


@dataclass(frozen=True)
class Card:
    """A learning item together with its scheduling record."""

    card_id: str
    deck: str
    memory: MemorySnapshot
    history: tuple[ReviewLogEntry, ...] = ()
    stats: CardStats = field(default_factory=CardStats)

    @classmethod
    def new(cls, card_id: str, deck: str = "Default", now: datetime | None = None) -> "Card":
        return cls(card_id=card_id, deck=deck, memory=MemorySnapshot.new(now))


def _coerce_steps(name: str, raw: Any) -> tuple[float, ...]:
    if isinstance(raw, (str, bytes)) or not hasattr(raw, "__iter__"):
        raise ConfigurationError(f"{name} must be a list of minutes, got {raw!r}")
    steps = []
    for value in raw:
        try:
            minutes = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{name} contains a non-numeric step: {value!r}") from e
        if not math.isfinite(minutes):
            raise ConfigurationError(f"{name} contains a non-finite step: {value!r}")
        if minutes < 0:
            raise ConfigurationError(f"{name} contains a negative step: {value!r}")
        if minutes > MAX_INTERVAL_DAYS * MINUTES_PER_DAY:
            raise ConfigurationError(
                f"{name} contains a step longer than {MAX_INTERVAL_DAYS:g} days: {value!r}"
            )
        steps.append(minutes)
    if not steps:
        raise ConfigurationError(f"{name} must contain at least one step")
    return tuple(steps)


@dataclass(frozen=True)
class StepLadderConfig:
    """
    Short-term scheduling settings for one deck.

    Attributes:
        learning_steps: Minutes between presentations of a Learning card.
        relearning_steps: Minutes between presentations of a Relearning card.
        graduating_interval_days: Interval after the last learning step.
        easy_interval_days: Interval after an Easy rating during learning.

    Raises:
        ConfigurationError: On construction, if a ladder is empty, holds a
            negative or non-finite value, or an interval is shorter than one
            day or longer than MAX_INTERVAL_DAYS.
    """

    learning_steps: tuple[float, ...] = DEFAULT_LEARNING_STEPS
    relearning_steps: tuple[float, ...] = DEFAULT_RELEARNING_STEPS
    graduating_interval_days: float = DEFAULT_GRADUATING_INTERVAL_DAYS
    easy_interval_days: float = DEFAULT_EASY_INTERVAL_DAYS

    def __post_init__(self):
        object.__setattr__(
            self, "learning_steps", _coerce_steps("learning_steps", self.learning_steps)
        )
        object.__setattr__(
            self, "relearning_steps", _coerce_steps("relearning_steps", self.relearning_steps)
        )
        for name in ("graduating_interval_days", "easy_interval_days"):
            value = getattr(self, name)
            try:
                days = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
            if not math.isfinite(days) or days > MAX_INTERVAL_DAYS:
                raise ConfigurationError(
                    f"{name} must be a finite number of at most {MAX_INTERVAL_DAYS:g} days"
                )
            if days < MIN_GRADUATION_DAYS:
                raise ConfigurationError(f"{name} must be at least {MIN_GRADUATION_DAYS:g} day")
            object.__setattr__(self, name, days)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], base: "StepLadderConfig | None" = None
    ) -> "StepLadderConfig":
        """
        Build a ladder from a config mapping.

        Accepts snake_case or camelCase keys (`learningSteps`,
        `graduatingInterval`, ...). Missing keys are taken from `base`.
        """
        base = base or cls()
        aliases = {
            "learning_steps": ("learning_steps", "learningSteps"),
            "relearning_steps": ("relearning_steps", "relearningSteps"),
            "graduating_interval_days": (
                "graduating_interval_days",
                "graduatingIntervalDays",
                "graduatingInterval",
            ),
            "easy_interval_days": ("easy_interval_days", "easyIntervalDays", "easyInterval"),
        }
        values: dict[str, Any] = {}
        for attr, keys in aliases.items():
            values[attr] = getattr(base, attr)
            for key in keys:
                if key in data:
                    values[attr] = data[key]
                    break
        return cls(**values)

    def ladder_for(self, state: CardState) -> tuple[float, ...]:
        if state == CardState.RELEARNING:
            return self.relearning_steps
        return self.learning_steps


@dataclass
class SessionStepState:
    """
    Position of one card on its step ladder during a study session.

    Lives only as long as the session; never stored on the card.
    """

    card_id: str
    step_index: int = 0


@dataclass(frozen=True)
class ReviewSnapshot:
    """
    Everything needed to reverse one rating.

    `step_index_before` is None when the card had no step entry in the
    session before the rating.
    """

    card_index: int
    card_id: str
    memory_before: MemorySnapshot
    history_before: tuple[ReviewLogEntry, ...]
    stats_before: CardStats
    session_stats_before: SessionStats
    step_index_before: int | None
    rating: Rating
    applied_at: datetime
