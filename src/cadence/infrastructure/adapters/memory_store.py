"""In-memory card store, used by tests and the CLI."""

import logging

from cadence.domain.models import Card
from cadence.domain.ports import CardStore

logger = logging.getLogger(__name__)


class InMemoryCardStore(CardStore):
    def __init__(self):
        self._cards: dict[str, Card] = {}

    def save_card(self, card: Card) -> bool:
        self._cards[card.card_id] = card
        logger.debug(f"Saved card {card.card_id} ({card.memory.state.name})")
        return True

    def load_card(self, card_id: str) -> Card | None:
        return self._cards.get(card_id)

    def __len__(self) -> int:
        return len(self._cards)
