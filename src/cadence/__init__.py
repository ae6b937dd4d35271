"""
cadence: spaced-repetition scheduling core.

Quick start:
    from cadence.application.config import resolve_config
    from cadence.application.factory import get_review_session
    from cadence.domain.models import Card, Rating
    from cadence.infrastructure.adapters import InMemoryCardStore

    session = get_review_session(resolve_config(), InMemoryCardStore())
    card = session.rate(Card.new("c1"), Rating.GOOD)
    session.undo()
    session.end()
"""

__version__ = "0.1.0"
