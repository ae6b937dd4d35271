"""
Card and session statistics.

Pure computation, no I/O.
"""

from dataclasses import replace

from cadence.domain.models import CardState, CardStats, Rating, SessionStats


def is_correct(rating: Rating) -> bool:
    return rating != Rating.AGAIN


def update_card_stats(stats: CardStats, rating: Rating, response_time_ms: int = 0) -> CardStats:
    """Fold one review into a card's running statistics."""
    total_reviews = stats.total_reviews + 1
    total_time = stats.total_time_ms + max(0, response_time_ms)
    remembered = round(stats.memory_rate * stats.total_reviews) + (1 if is_correct(rating) else 0)
    return CardStats(
        total_reviews=total_reviews,
        total_time_ms=total_time,
        average_time_ms=total_time / total_reviews,
        memory_rate=remembered / total_reviews,
    )


def update_session_stats(
    stats: SessionStats,
    prior_state: CardState,
    rating: Rating,
    response_time_ms: int = 0,
) -> SessionStats:
    return replace(
        stats,
        cards_reviewed=stats.cards_reviewed + 1,
        new_cards_learned=stats.new_cards_learned + (1 if prior_state == CardState.NEW else 0),
        correct_answers=stats.correct_answers + (1 if is_correct(rating) else 0),
        total_time_ms=stats.total_time_ms + max(0, response_time_ms),
    )
