from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from cadence.application.state_machine import ReviewStateMachine
from cadence.domain.models import (
    CardState,
    MemorySnapshot,
    Rating,
    ReviewLogEntry,
    StepLadderConfig,
)
from cadence.domain.ports import MemoryModel


class StubMemoryModel(MemoryModel):
    """
    Deterministic stand-in for FSRS.

    Proposes a far-future due date for every card so tests can tell whether
    the step scheduler replaced it.
    """

    ADVISORY_DAYS = 999.0

    def __init__(self):
        self.calls = []

    def review(self, snapshot, rating, now):
        self.calls.append((snapshot, rating, now))
        elapsed = 0.0
        if snapshot.last_review is not None:
            elapsed = (now - snapshot.last_review).total_seconds() / 86400.0

        if snapshot.state == CardState.REVIEW:
            if rating == Rating.AGAIN:
                state, stability = CardState.RELEARNING, max(0.1, snapshot.stability / 2)
            else:
                state, stability = CardState.REVIEW, snapshot.stability * (1 + int(rating))
            scheduled = stability
        else:
            state = CardState.REVIEW if rating >= Rating.GOOD else CardState.LEARNING
            stability = float(rating)
            scheduled = self.ADVISORY_DAYS

        lapsed = snapshot.state == CardState.REVIEW and rating == Rating.AGAIN
        result = replace(
            snapshot,
            due=now + timedelta(days=scheduled),
            stability=stability,
            difficulty=5.0,
            elapsed_days=elapsed,
            scheduled_days=scheduled,
            lapses=snapshot.lapses + (1 if lapsed else 0),
            state=state,
            last_review=now,
            retrievability=0.9,
        )
        log = ReviewLogEntry(
            rating=rating,
            timestamp=now,
            elapsed_days=elapsed,
            scheduled_days=scheduled,
            stability=stability,
            difficulty=5.0,
        )
        return result, log

    def retrievability(self, snapshot, now):
        return 0.9


@pytest.fixture
def now():
    return datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def ladder():
    return StepLadderConfig()


@pytest.fixture
def stub_model():
    return StubMemoryModel()


@pytest.fixture
def machine(stub_model):
    return ReviewStateMachine(stub_model)


@pytest.fixture
def review_snapshot(now):
    """A graduated card last seen five days ago."""
    return MemorySnapshot(
        due=now,
        stability=5.0,
        difficulty=5.0,
        elapsed_days=3.0,
        scheduled_days=5.0,
        reps=4,
        lapses=0,
        state=CardState.REVIEW,
        last_review=now - timedelta(days=5),
        retrievability=0.9,
    )


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files from the real user directory
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "CADENCE_LEARNING_STEPS",
        "CADENCE_RELEARNING_STEPS",
        "CADENCE_GRADUATING_INTERVAL_DAYS",
        "CADENCE_EASY_INTERVAL_DAYS",
        "CADENCE_DECK_CONFIG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
