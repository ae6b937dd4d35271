"""Tests for the session step registry."""

import pytest

from cadence.application.session import SessionStepRegistry, generate_session_id
from cadence.domain.exceptions import SessionClosedError


@pytest.fixture
def registry():
    return SessionStepRegistry()


def test_generated_session_ids_are_unique():
    assert generate_session_id() != generate_session_id()
    assert generate_session_id().startswith("session_")


def test_first_encounter_starts_at_zero(registry):
    sid = registry.open_session()
    assert registry.peek_step(sid, "c1") is None
    state = registry.step_state(sid, "c1")
    assert state.card_id == "c1"
    assert state.step_index == 0
    assert registry.peek_step(sid, "c1") == 0


def test_step_state_is_shared_per_card(registry):
    sid = registry.open_session()
    registry.step_state(sid, "c1").step_index = 2
    assert registry.step_state(sid, "c1").step_index == 2


def test_sessions_are_isolated(registry):
    a = registry.open_session("a")
    b = registry.open_session("b")
    registry.set_step(a, "c1", 3)
    assert registry.peek_step(b, "c1") is None


def test_forget_and_close(registry):
    sid = registry.open_session()
    registry.set_step(sid, "c1", 1)
    registry.forget(sid, "c1")
    assert registry.peek_step(sid, "c1") is None

    registry.set_step(sid, "c2", 1)
    registry.close_session(sid)
    assert not registry.is_open(sid)
    assert registry.active_sessions() == 0
    assert registry.peek_step(sid, "c2") is None


def test_step_state_on_closed_session_raises(registry):
    with pytest.raises(SessionClosedError, match="missing"):
        registry.step_state("missing", "c1")

    sid = registry.open_session()
    registry.close_session(sid)
    with pytest.raises(SessionClosedError):
        registry.set_step(sid, "c1", 1)


def test_set_step_never_negative(registry):
    sid = registry.open_session()
    registry.set_step(sid, "c1", -4)
    assert registry.peek_step(sid, "c1") == 0
