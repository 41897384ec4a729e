"""Dashboard numbers derived from the live mood history.

Nothing here is stored: every render recomputes from the history.
"""
import enum
from dataclasses import dataclass
from datetime import timedelta
from statistics import mean
from typing import Optional

from .moods import mood_emoji, now_local

WINDOW_DAYS = 7
LOW_MOOD_MAX = 2
LOW_RISK_AVERAGE = 3.5
HIGH_RISK_AVERAGE = 2.5
HIGH_RISK_LOW_SHARE = 0.5


class RiskLevel(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class DashboardMetrics:
    weekly_average: Optional[float]
    streak_days: int
    total_check_ins: int
    risk_level: RiskLevel

    @property
    def insufficient_data(self):
        return self.weekly_average is None


@dataclass(frozen=True)
class RecentMood:
    label: str
    mood: int
    emoji: str


def _local_date(ts, now):
    return ts.astimezone(now.tzinfo).date()


def trailing_entries(history, now, days=WINDOW_DAYS):
    cutoff = now - timedelta(days=days)
    return [e for e in history if cutoff <= e.timestamp <= now]


def streak_days(history, now):
    """Consecutive days with a check-in, counting back from today.

    An empty today does not break a streak that reached yesterday; it just
    isn't counted yet.
    """
    days = {_local_date(e.timestamp, now) for e in history}
    day = now.date()
    if day not in days:
        day -= timedelta(days=1)
    streak = 0
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def month_check_ins(history, now):
    count = 0
    for e in history:
        day = _local_date(e.timestamp, now)
        if (day.year, day.month) == (now.year, now.month):
            count += 1
    return count


def risk_level(weekly_moods):
    if not weekly_moods:
        return RiskLevel.LOW
    avg = mean(weekly_moods)
    low_share = sum(1 for m in weekly_moods if m <= LOW_MOOD_MAX) / len(weekly_moods)
    if avg < HIGH_RISK_AVERAGE or low_share >= HIGH_RISK_LOW_SHARE:
        return RiskLevel.HIGH
    if avg >= LOW_RISK_AVERAGE:
        return RiskLevel.LOW
    return RiskLevel.MEDIUM


def compute_metrics(history, now=None):
    now = now or now_local()
    weekly = [e.mood for e in trailing_entries(history, now)]
    return DashboardMetrics(
        weekly_average=float(mean(weekly)) if weekly else None,
        streak_days=streak_days(history, now),
        total_check_ins=month_check_ins(history, now),
        risk_level=risk_level(weekly),
    )


def _day_label(days_ago):
    if days_ago == 0:
        return "Today"
    if days_ago == 1:
        return "Yesterday"
    return f"{days_ago} days ago"


def recent_moods(history, limit=5, now=None):
    """Newest-first rows for the recent history list."""
    now = now or now_local()
    rows = []
    shown = history if limit is None else history[-limit:]
    for entry in reversed(shown):
        days_ago = (now.date() - _local_date(entry.timestamp, now)).days
        rows.append(RecentMood(_day_label(days_ago), entry.mood, mood_emoji(entry.mood)))
    return rows


def daily_averages(history, days=14, now=None):
    """(date, average mood or None) for each of the last ``days`` days, oldest first."""
    now = now or now_local()
    by_day = {}
    for entry in history:
        by_day.setdefault(_local_date(entry.timestamp, now), []).append(entry.mood)
    out = []
    for offset in range(days - 1, -1, -1):
        day = now.date() - timedelta(days=offset)
        values = by_day.get(day)
        out.append((day, float(mean(values)) if values else None))
    return out
