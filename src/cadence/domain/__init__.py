# Domain Package
from .exceptions import (
    CadenceError,
    ConfigurationError,
    PersistenceFailure,
    SessionClosedError,
)
from .models import (
    Card,
    CardState,
    CardStats,
    MemorySnapshot,
    Rating,
    ReviewLogEntry,
    ReviewSnapshot,
    SessionStats,
    SessionStepState,
    StepLadderConfig,
)
from .ports import CardStore, DeckConfigProvider, MemoryModel

__all__ = [
    "CadenceError",
    "ConfigurationError",
    "PersistenceFailure",
    "SessionClosedError",
    "Card",
    "CardState",
    "CardStats",
    "MemorySnapshot",
    "Rating",
    "ReviewLogEntry",
    "ReviewSnapshot",
    "SessionStats",
    "SessionStepState",
    "StepLadderConfig",
    "CardStore",
    "DeckConfigProvider",
    "MemoryModel",
]
