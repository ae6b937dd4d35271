from datetime import timedelta

import pytest

from cadence.application.utils.text import format_due, format_interval


@pytest.mark.parametrize(
    "days,label",
    [
        (0, "0m"),
        (1 / 1440, "1m"),
        (10 / 1440, "10m"),
        (0.5, "12h"),
        (1, "1d"),
        (4, "4d"),
        (60, "2mo"),
        (730, "2.0y"),
    ],
)
def test_format_interval(days, label):
    assert format_interval(days) == label


def test_format_interval_negative_is_zero():
    assert format_interval(-3) == "0m"


def test_format_due(now):
    assert format_due(now + timedelta(minutes=10), now) == "10m"
    assert format_due(now + timedelta(days=4), now) == "4d"
