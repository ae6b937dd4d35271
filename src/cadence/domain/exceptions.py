"""Errors raised by the scheduling core."""


class CadenceError(Exception):
    """Base class for all cadence errors."""


class ConfigurationError(CadenceError, ValueError):
    """A step ladder or interval setting is invalid.

    Raised when configuration is loaded, never while a rating is applied.
    """


class PersistenceFailure(CadenceError):
    """The storage collaborator could not save a card."""

    def __init__(self, card_id: str, reason: str = "save rejected by store"):
        super().__init__(f"Failed to persist card '{card_id}': {reason}")
        self.card_id = card_id
        self.reason = reason


class SessionClosedError(CadenceError, LookupError):
    """A study session was used after it ended, or was never opened."""

    def __init__(self, session_id: str):
        super().__init__(f"Study session '{session_id}' is not open")
        self.session_id = session_id
