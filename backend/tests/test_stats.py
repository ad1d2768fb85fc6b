from datetime import date

from gympro.services.stats import latest_streak, longest_streak


def d(day):
    return date(2026, 3, day)


def test_longest_streak():
    assert longest_streak([]) == 0
    assert longest_streak([d(1)]) == 1
    assert longest_streak([d(1), d(2), d(3), d(7), d(8)]) == 3
    # duplicates and ordering do not matter
    assert longest_streak([d(8), d(7), d(7), d(9), d(1)]) == 3


def test_longest_streak_crosses_month_end():
    assert longest_streak([date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1)]) == 3


def test_latest_streak_ends_at_most_recent_day():
    assert latest_streak([]) == 0
    assert latest_streak([d(1), d(2), d(3), d(7), d(8)]) == 2
    assert latest_streak([d(1), d(2), d(3), d(5)]) == 1
    assert latest_streak([d(4), d(3), d(3), d(2)]) == 3
