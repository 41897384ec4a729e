"""Tests for dashboard metric derivation."""

from __future__ import annotations

from datetime import timedelta

from conftest import NOW

from wellnest.dashboard import (
    RiskLevel,
    compute_metrics,
    daily_averages,
    recent_moods,
    risk_level,
    streak_days,
)
from wellnest.moods import MoodEntry


def _entry(mood, days_ago=0, hours=0):
    return MoodEntry(NOW - timedelta(days=days_ago, hours=hours), mood)


# ---- empty history ----


def test_empty_history():
    m = compute_metrics([], now=NOW)
    assert m.weekly_average is None
    assert m.insufficient_data
    assert m.streak_days == 0
    assert m.total_check_ins == 0
    assert m.risk_level is RiskLevel.LOW


# ---- weekly average ----


def test_weekly_average_uses_trailing_seven_days():
    history = [_entry(1, days_ago=9), _entry(4, days_ago=3), _entry(3, days_ago=1)]
    assert compute_metrics(history, now=NOW).weekly_average == 3.5


def test_weekly_average_is_float():
    m = compute_metrics([_entry(4), _entry(4, days_ago=1)], now=NOW)
    assert isinstance(m.weekly_average, float)
    assert m.weekly_average == 4.0


def test_old_entries_only_is_insufficient():
    m = compute_metrics([_entry(1, days_ago=8)], now=NOW)
    assert m.insufficient_data
    assert m.risk_level is RiskLevel.LOW


# ---- streak ----


def test_streak_today_and_yesterday():
    history = [_entry(4, days_ago=1), _entry(3)]
    assert compute_metrics(history, now=NOW).streak_days == 2


def test_gap_breaks_streak():
    history = [_entry(5, days_ago=5), _entry(5, days_ago=4), _entry(4, days_ago=1), _entry(3)]
    assert compute_metrics(history, now=NOW).streak_days == 2


def test_several_entries_on_one_day_count_once():
    history = [_entry(3, hours=5), _entry(4, hours=1)]
    assert streak_days(history, NOW) == 1


def test_empty_today_does_not_break_yesterdays_streak():
    history = [_entry(3, days_ago=3), _entry(4, days_ago=2), _entry(4, days_ago=1)]
    assert streak_days(history, NOW) == 3


def test_streak_is_zero_when_yesterday_and_today_are_empty():
    assert streak_days([_entry(4, days_ago=2)], NOW) == 0


# ---- total check-ins ----


def test_total_check_ins_counts_current_month_only():
    # NOW is March 18th
    history = [_entry(3, days_ago=20), _entry(3, days_ago=17), _entry(3, days_ago=2), _entry(3)]
    assert compute_metrics(history, now=NOW).total_check_ins == 3


# ---- risk level ----


def test_high_risk_from_share_of_low_days_regardless_of_average():
    moods = [1, 2, 2, 2, 5, 5, 5]
    assert risk_level(moods) is RiskLevel.HIGH
    history = [_entry(m, days_ago=i) for i, m in enumerate(moods)]
    assert compute_metrics(history, now=NOW).risk_level is RiskLevel.HIGH


def test_half_low_beats_a_good_average():
    # average 3.5 would be low risk on its own
    assert risk_level([2, 5]) is RiskLevel.HIGH


def test_high_risk_from_low_average():
    assert risk_level([3, 2, 2, 3, 1, 3]) is RiskLevel.HIGH


def test_low_risk():
    assert risk_level([4, 4, 3, 4]) is RiskLevel.LOW
    assert risk_level([]) is RiskLevel.LOW


def test_medium_risk():
    assert risk_level([3, 3, 3, 4]) is RiskLevel.MEDIUM
    assert risk_level([3, 2, 3, 4]) is RiskLevel.MEDIUM


# ---- recent moods / trend ----


def test_recent_moods_newest_first_with_labels():
    history = [_entry(5, days_ago=3), _entry(2, days_ago=2), _entry(3, days_ago=1), _entry(4)]
    rows = recent_moods(history, limit=3, now=NOW)
    assert [(r.label, r.mood, r.emoji) for r in rows] == [
        ("Today", 4, "🙂"),
        ("Yesterday", 3, "😐"),
        ("2 days ago", 2, "🙁"),
    ]


def test_daily_averages_covers_each_day():
    history = [_entry(2, days_ago=1, hours=2), _entry(4, days_ago=1, hours=1), _entry(5)]
    trend = daily_averages(history, days=3, now=NOW)
    assert [avg for _, avg in trend] == [None, 3.0, 5.0]
    assert trend[-1][0] == NOW.date()
