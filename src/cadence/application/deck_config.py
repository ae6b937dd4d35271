"""Resolves the step ladder that applies to a deck."""

import logging

from cadence.domain.models import StepLadderConfig
from cadence.domain.ports import DeckConfigProvider

logger = logging.getLogger(__name__)


class DeckConfigResolver:
    """
    Looks up per-deck overrides, falling back to the caller's global default.
    """

    def __init__(self, provider: DeckConfigProvider | None, global_default: StepLadderConfig):
        self._provider = provider
        self._default = global_default

    @property
    def global_default(self) -> StepLadderConfig:
        return self._default

    def resolve(self, deck: str) -> StepLadderConfig:
        if self._provider is not None:
            override = self._provider.get_ladder(deck)
            if override is not None:
                return override
        logger.debug(f"Deck '{deck}' uses the global step ladder")
        return self._default
