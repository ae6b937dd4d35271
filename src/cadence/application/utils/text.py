from datetime import datetime, timedelta

from cadence.domain.constants import MINUTES_PER_DAY

# ---------- Interval labels (rating buttons, CLI output) ----------


def format_interval(days: float) -> str:
    """
    Short human label for an interval given in days.

    >>> format_interval(10 / 1440)
    '10m'
    >>> format_interval(0.5)
    '12h'
    >>> format_interval(4)
    '4d'
    >>> format_interval(60)
    '2mo'
    >>> format_interval(730)
    '2.0y'
    """
    days = max(0.0, days)
    minutes = days * MINUTES_PER_DAY
    if minutes < 60:
        return f"{round(minutes)}m"
    if days < 1:
        return f"{round(minutes / 60)}h"
    if days < 30:
        return f"{round(days)}d"
    if days < 365:
        return f"{round(days / 30)}mo"
    return f"{days / 365:.1f}y"


def format_due(due: datetime, now: datetime) -> str:
    """Label for the time between `now` and `due`."""
    delta: timedelta = due - now
    return format_interval(delta.total_seconds() / 86400.0)
