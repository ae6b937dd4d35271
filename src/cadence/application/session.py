"""
Session step registry.

An explicit arena mapping session id -> card id -> SessionStepState. Step
indices live here for the length of one study session and are dropped
wholesale when the session closes; they never reach the durable card.
"""

import logging

from ulid import ULID

from cadence.domain.exceptions import SessionClosedError
from cadence.domain.models import SessionStepState

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """Generate a unique study session ID using ULID."""
    return f"session_{ULID()}"


class SessionStepRegistry:
    def __init__(self):
        self._sessions: dict[str, dict[str, SessionStepState]] = {}

    def open_session(self, session_id: str | None = None) -> str:
        session_id = session_id or generate_session_id()
        self._sessions.setdefault(session_id, {})
        logger.info(f"Opened study session {session_id}")
        return session_id

    def is_open(self, session_id: str) -> bool:
        return session_id in self._sessions

    def step_state(self, session_id: str, card_id: str) -> SessionStepState:
        """
        Return the card's step state, creating it at index 0 on first encounter.

        Raises:
            SessionClosedError: If the session is not open.
        """
        cards = self._sessions.get(session_id)
        if cards is None:
            raise SessionClosedError(session_id)
        if card_id not in cards:
            cards[card_id] = SessionStepState(card_id=card_id)
        return cards[card_id]

    def peek_step(self, session_id: str, card_id: str) -> int | None:
        """Current step index, or None if the card has not been seen this session."""
        state = self._sessions.get(session_id, {}).get(card_id)
        return state.step_index if state else None

    def set_step(self, session_id: str, card_id: str, step_index: int) -> None:
        self.step_state(session_id, card_id).step_index = max(0, step_index)

    def forget(self, session_id: str, card_id: str) -> None:
        self._sessions.get(session_id, {}).pop(card_id, None)

    def close_session(self, session_id: str) -> None:
        cards = self._sessions.pop(session_id, None)
        if cards is not None:
            logger.info(f"Closed study session {session_id} ({len(cards)} card step(s) dropped)")

    def active_sessions(self) -> int:
        return len(self._sessions)
