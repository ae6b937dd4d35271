"""
Deck configuration providers.

Both providers validate every ladder when they are built, so a bad deck
configuration fails at load time rather than in the middle of a session.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from cadence.domain.exceptions import ConfigurationError
from cadence.domain.models import StepLadderConfig
from cadence.domain.ports import DeckConfigProvider

logger = logging.getLogger(__name__)


def _build_ladders(
    decks: Mapping[str, Any], base: StepLadderConfig | None
) -> dict[str, StepLadderConfig]:
    ladders: dict[str, StepLadderConfig] = {}
    for name, raw in decks.items():
        if isinstance(raw, StepLadderConfig):
            ladders[str(name)] = raw
            continue
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Deck '{name}': expected a mapping, got {type(raw).__name__}")
        try:
            ladders[str(name)] = StepLadderConfig.from_mapping(raw, base=base)
        except ConfigurationError as e:
            raise ConfigurationError(f"Deck '{name}': {e}") from e
    return ladders


class StaticDeckConfigProvider(DeckConfigProvider):
    """In-memory per-deck overrides."""

    def __init__(
        self,
        decks: Mapping[str, Any] | None = None,
        base: StepLadderConfig | None = None,
    ):
        self._ladders = _build_ladders(decks or {}, base)

    def get_ladder(self, deck: str) -> StepLadderConfig | None:
        return self._ladders.get(deck)


class YamlDeckConfigProvider(DeckConfigProvider):
    """
    Per-deck overrides read from a YAML file.

    Expected layout:

        decks:
          Spanish:
            learning_steps: [1, 5, 15]
            graduating_interval_days: 2
          Physics:
            relearningSteps: [5]

    Keys missing from a deck entry fall back to `base`.
    """

    def __init__(self, path: Path, base: StepLadderConfig | None = None):
        self.path = Path(path)
        self._ladders = _build_ladders(self._read(self.path), base)
        logger.info(f"Loaded {len(self._ladders)} deck ladder(s) from {self.path}")

    def get_ladder(self, deck: str) -> StepLadderConfig | None:
        return self._ladders.get(deck)

    @staticmethod
    def _read(path: Path) -> Mapping[str, Any]:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigurationError(f"Cannot read deck config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in deck config {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Deck config {path} must be a mapping")
        decks = data.get("decks", {})
        if decks is None:
            return {}
        if not isinstance(decks, Mapping):
            raise ConfigurationError(f"'decks' in {path} must be a mapping of deck names")
        return decks
