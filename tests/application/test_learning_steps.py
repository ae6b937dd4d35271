"""Tests for the learning step scheduler."""

from datetime import datetime, timedelta, timezone

import pytest

from cadence.application.learning_steps import (
    LearningStepScheduler,
    clamp_step,
    days_from,
    minutes_from,
    to_whole_ms,
)
from cadence.domain.models import CardState, Rating, StepLadderConfig

NON_REVIEW = [CardState.NEW, CardState.LEARNING, CardState.RELEARNING]


@pytest.fixture
def scheduler():
    return LearningStepScheduler()


def test_review_cards_are_left_to_memory_model(scheduler, ladder, now):
    for rating in Rating:
        assert scheduler.schedule(CardState.REVIEW, rating, ladder, 0, now) is None


@pytest.mark.parametrize("length", [1, 2, 3, 5])
def test_repeated_hard_never_overflows_ladder(scheduler, now, length):
    ladder = StepLadderConfig(learning_steps=[float(i + 1) for i in range(length)])
    index = 0
    for _ in range(length + 4):
        decision = scheduler.schedule(CardState.LEARNING, Rating.HARD, ladder, index, now)
        assert decision.state == CardState.LEARNING
        assert decision.step_index <= length - 1
        index = decision.step_index
    assert index == length - 1


def test_hard_repeats_current_rung(scheduler, now):
    ladder = StepLadderConfig(learning_steps=[1, 10])
    decision = scheduler.schedule(CardState.LEARNING, Rating.HARD, ladder, 0, now)
    assert decision.due == now + timedelta(minutes=1)
    assert decision.step_index == 1


@pytest.mark.parametrize("steps", [[1], [1, 10], [1, 5, 10, 30]])
def test_good_run_graduates_within_ladder_length(scheduler, now, steps):
    ladder = StepLadderConfig(learning_steps=steps)
    index, state = 0, CardState.LEARNING
    for count in range(1, len(steps) + 1):
        decision = scheduler.schedule(state, Rating.GOOD, ladder, index, now)
        index, state = decision.step_index, decision.state
        if state == CardState.REVIEW:
            break
    assert state == CardState.REVIEW
    assert count <= len(steps)
    assert index == 0


@pytest.mark.parametrize("prior", NON_REVIEW)
@pytest.mark.parametrize("index", [0, 1, 7])
def test_easy_always_graduates(scheduler, now, prior, index):
    ladder = StepLadderConfig(easy_interval_days=4)
    decision = scheduler.schedule(prior, Rating.EASY, ladder, index, now)
    assert decision.state == CardState.REVIEW
    assert decision.scheduled_days == 4.0
    assert decision.step_index == 0
    assert decision.due == now + timedelta(days=4)


@pytest.mark.parametrize("prior", NON_REVIEW)
def test_again_resets_to_first_rung(scheduler, now, prior):
    ladder = StepLadderConfig(learning_steps=[3, 30], relearning_steps=[5, 50])
    decision = scheduler.schedule(prior, Rating.AGAIN, ladder, 1, now)
    first = ladder.ladder_for(prior)[0]
    assert decision.step_index == 0
    assert now <= decision.due <= now + timedelta(minutes=first)
    expected_state = CardState.RELEARNING if prior == CardState.RELEARNING else CardState.LEARNING
    assert decision.state == expected_state


def test_new_card_enters_learning(scheduler, ladder, now):
    decision = scheduler.schedule(CardState.NEW, Rating.GOOD, ladder, 0, now)
    assert decision.state == CardState.LEARNING
    assert decision.step_index == 1
    assert decision.due == now + timedelta(minutes=10)


def test_relearning_uses_relearning_ladder(scheduler, now):
    ladder = StepLadderConfig(learning_steps=[1, 10], relearning_steps=[15])
    decision = scheduler.schedule(CardState.RELEARNING, Rating.HARD, ladder, 0, now)
    assert decision.due == now + timedelta(minutes=15)
    assert decision.state == CardState.RELEARNING
    graduated = scheduler.schedule(CardState.RELEARNING, Rating.GOOD, ladder, 0, now)
    assert graduated.state == CardState.REVIEW


def test_graduation_uses_graduating_interval(scheduler, now):
    ladder = StepLadderConfig(learning_steps=[1], graduating_interval_days=3)
    decision = scheduler.schedule(CardState.LEARNING, Rating.GOOD, ladder, 0, now)
    assert decision.scheduled_days == 3.0
    assert decision.due == now + timedelta(days=3)


def test_zero_minute_step_is_not_in_the_past(scheduler, now):
    ladder = StepLadderConfig(learning_steps=[0])
    decision = scheduler.schedule(CardState.NEW, Rating.AGAIN, ladder, 0, now)
    assert decision.due == now
    assert decision.scheduled_days == 0.0


def test_out_of_range_index_is_clamped(scheduler, now):
    ladder = StepLadderConfig(learning_steps=[1, 10])
    decision = scheduler.schedule(CardState.LEARNING, Rating.HARD, ladder, 42, now)
    assert decision.due == now + timedelta(minutes=10)
    assert decision.step_index == 1


def test_enter_relearning(scheduler, now):
    ladder = StepLadderConfig(relearning_steps=[20, 60])
    decision = scheduler.enter_relearning(ladder, now)
    assert decision.state == CardState.RELEARNING
    assert decision.step_index == 0
    assert decision.due == now + timedelta(minutes=20)


class TestTimeHelpers:
    def test_clamp_step(self):
        assert clamp_step(-3, (1.0, 2.0)) == 0
        assert clamp_step(1, (1.0, 2.0)) == 1
        assert clamp_step(9, (1.0, 2.0)) == 1

    def test_to_whole_ms_rounds_up(self):
        moment = datetime(2026, 1, 1, 0, 0, 0, 1500, tzinfo=timezone.utc)
        assert to_whole_ms(moment).microsecond == 2000
        exact = datetime(2026, 1, 1, 0, 0, 0, 3000, tzinfo=timezone.utc)
        assert to_whole_ms(exact) == exact

    def test_offsets_land_on_whole_ms(self):
        moment = datetime(2026, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
        assert minutes_from(moment, 0.5).microsecond % 1000 == 0
        assert days_from(moment, 1.5).microsecond % 1000 == 0
        assert minutes_from(moment, 0) >= moment

    @pytest.mark.parametrize("value", [float("inf"), float("nan"), 1e12, -5.0])
    def test_offsets_never_raise(self, now, value):
        assert now <= days_from(now, value) <= now + timedelta(days=36500)
        assert now <= minutes_from(now, value) <= now + timedelta(days=36500)

    def test_longest_graduation_is_scheduled(self, scheduler, now):
        config = StepLadderConfig(easy_interval_days=36500)
        decision = scheduler.schedule(CardState.LEARNING, Rating.EASY, config, 0, now)
        assert decision.due == now + timedelta(days=36500)
