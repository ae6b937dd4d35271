"""
Ports (interfaces) for the scheduling core.

These define the contracts that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Card, MemorySnapshot, Rating, ReviewLogEntry, StepLadderConfig


class MemoryModel(ABC):
    """
    Port for the long-term memory algorithm.

    Implementations:
        - FsrsMemoryModel: FSRS via the `fsrs` library.
    """

    @abstractmethod
    def review(
        self, snapshot: MemorySnapshot, rating: Rating, now: datetime
    ) -> tuple[MemorySnapshot, ReviewLogEntry]:
        """
        Compute the memory state after a review.

        Must be deterministic for identical inputs. Must not decrease `reps`
        and may increment `lapses` only when a Review card is rated Again.
        The proposed `due`/`scheduled_days` are advisory for any card that is
        not in stable Review scheduling.

        Args:
            snapshot: State before the review.
            rating: Recall quality.
            now: Time of the review (aware, UTC).

        Returns:
            The new snapshot and the log entry for this review.
        """
        pass

    @abstractmethod
    def retrievability(self, snapshot: MemorySnapshot, now: datetime) -> float:
        """Recall probability of the card at `now`."""
        pass


class CardStore(ABC):
    """
    Port for durable card storage.

    Implementations:
        - InMemoryCardStore: dict-backed store for tests and tooling.
    """

    @abstractmethod
    def save_card(self, card: Card) -> bool:
        """
        Persist a card.

        Returns:
            True on success, False if the store rejected the save.
        """
        pass


class DeckConfigProvider(ABC):
    """
    Port for per-deck step ladder overrides.

    Implementations:
        - StaticDeckConfigProvider: in-memory mapping.
        - YamlDeckConfigProvider: YAML file loaded at construction.
    """

    @abstractmethod
    def get_ladder(self, deck: str) -> StepLadderConfig | None:
        """Return the deck's override, or None if the deck uses the default."""
        pass
