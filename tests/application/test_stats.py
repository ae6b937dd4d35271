from cadence.application.stats import update_card_stats, update_session_stats
from cadence.domain.models import CardState, CardStats, Rating, SessionStats


def test_card_stats_memory_rate():
    stats = CardStats()
    for rating in (Rating.GOOD, Rating.AGAIN, Rating.EASY, Rating.HARD):
        stats = update_card_stats(stats, rating, response_time_ms=1000)
    assert stats.total_reviews == 4
    assert stats.total_time_ms == 4000
    assert stats.average_time_ms == 1000
    assert stats.memory_rate == 0.75


def test_negative_response_time_ignored():
    stats = update_card_stats(CardStats(), Rating.GOOD, response_time_ms=-50)
    assert stats.total_time_ms == 0


def test_session_stats():
    stats = SessionStats()
    stats = update_session_stats(stats, CardState.NEW, Rating.GOOD, 500)
    stats = update_session_stats(stats, CardState.REVIEW, Rating.AGAIN, 700)
    assert stats.cards_reviewed == 2
    assert stats.new_cards_learned == 1
    assert stats.correct_answers == 1
    assert stats.total_time_ms == 1200
