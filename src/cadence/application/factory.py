"""
Session Factory
Centralizes wiring of the memory model, deck configs and review sessions.
"""

import logging

from cadence.application.config import AppConfig
from cadence.application.deck_config import DeckConfigResolver
from cadence.application.review_service import ReviewSession
from cadence.application.session import SessionStepRegistry
from cadence.application.state_machine import ReviewStateMachine
from cadence.domain.ports import CardStore, DeckConfigProvider, MemoryModel
from cadence.infrastructure.adapters.deck_configs import YamlDeckConfigProvider
from cadence.infrastructure.adapters.fsrs_model import FsrsMemoryModel

logger = logging.getLogger(__name__)


def get_memory_model(config: AppConfig) -> MemoryModel:
    return FsrsMemoryModel(
        desired_retention=config.desired_retention,
        maximum_interval=config.maximum_interval,
    )


def get_deck_configs(config: AppConfig) -> DeckConfigResolver:
    """
    Returns the deck ladder resolver for the given config.

    Raises:
        ConfigurationError: If the global ladder or the deck config file is invalid.
    """
    default = config.default_ladder()
    provider: DeckConfigProvider | None = None
    if config.deck_config_file is not None:
        provider = YamlDeckConfigProvider(config.deck_config_file, base=default)
    else:
        logger.debug("No deck config file; every deck uses the global ladder")
    return DeckConfigResolver(provider, default)


def get_review_session(
    config: AppConfig,
    store: CardStore,
    registry: SessionStepRegistry | None = None,
    session_id: str | None = None,
) -> ReviewSession:
    return ReviewSession(
        state_machine=ReviewStateMachine(get_memory_model(config)),
        store=store,
        deck_configs=get_deck_configs(config),
        registry=registry,
        session_id=session_id,
    )
