"""Mood check-ins and the durable mood history."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from .errors import ValidationError

logger = logging.getLogger(__name__)

MIN_MOOD = 1
MAX_MOOD = 5
NEUTRAL_MOOD = 3

CURRENT_MOOD_KEY = "current_mood"
HISTORY_KEY = "mood_history"

SOURCES = ("manual", "voice")


@dataclass(frozen=True)
class MoodOption:
    value: int
    label: str
    emoji: str


MOOD_OPTIONS = (
    MoodOption(5, "Great", "😊"),
    MoodOption(4, "Good", "🙂"),
    MoodOption(3, "Okay", "😐"),
    MoodOption(2, "Low", "🙁"),
    MoodOption(1, "Anxious", "😰"),
)


def mood_emoji(value):
    for opt in MOOD_OPTIONS:
        if opt.value == value:
            return opt.emoji
    return "😐"


def now_local():
    return datetime.now().astimezone()


def validate_mood(value):
    """Return ``value`` as a mood int or raise ValidationError."""
    if value is None:
        raise ValidationError("Please select your mood")
    # bool is an int subclass; True is not a mood
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Mood must be a whole number from {MIN_MOOD} to {MAX_MOOD}, got {value!r}")
    if not MIN_MOOD <= value <= MAX_MOOD:
        raise ValidationError(f"Mood must be from {MIN_MOOD} to {MAX_MOOD}, got {value}")
    return value


@dataclass(frozen=True)
class MoodEntry:
    timestamp: datetime
    mood: int
    notes: str = ""
    source: str = "manual"

    def to_dict(self):
        return {
            "ts": self.timestamp.isoformat(timespec="seconds"),
            "mood": self.mood,
            "notes": self.notes,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, raw):
        ts = datetime.fromisoformat(raw["ts"])
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=now_local().tzinfo)
        source = raw.get("source", "manual")
        if source not in SOURCES:
            source = "manual"
        return cls(
            timestamp=ts,
            mood=validate_mood(raw["mood"]),
            notes=str(raw.get("notes") or ""),
            source=source,
        )


class MoodStateStore:
    """Owns the mood history. The only writer of it.

    ``kv`` is the persistence collaborator (``get``/``set``/``append``/
    ``get_list``), ``clock`` returns an aware datetime and ``notify`` is an
    optional ``(title, description, severity)`` callable. History is read
    back from ``kv`` on every query, so check-ins saved by another session
    on the same store show up here too.
    """

    def __init__(self, kv, clock=None, notify=None):
        self._kv = kv
        self._clock = clock or now_local
        self._notify = notify

    def _load_history(self):
        entries = []
        for row in self._kv.get_list(HISTORY_KEY):
            try:
                entries.append(MoodEntry.from_dict(row))
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                logger.warning("Skipping unreadable mood entry %r: %s", row, e)
        return entries

    def set_mood(self, value, notes="", source="manual"):
        """Record a check-in and make ``value`` the current mood."""
        mood = validate_mood(value)
        if source not in SOURCES:
            raise ValidationError(f"Unknown check-in source {source!r}")
        entry = MoodEntry(timestamp=self._clock(), mood=mood, notes=(notes or "").strip(), source=source)
        self._kv.append(HISTORY_KEY, entry.to_dict())
        self._kv.set(CURRENT_MOOD_KEY, mood)
        logger.debug("Mood %d recorded (%s)", mood, source)
        if self._notify:
            self._notify("Check-in saved! 🌟", "Thank you for sharing how you're feeling today.", "success")
        return entry

    def get_current_mood(self):
        history = self._load_history()
        if history:
            return history[-1].mood
        stored = self._kv.get(CURRENT_MOOD_KEY, NEUTRAL_MOOD)
        try:
            return validate_mood(stored)
        except ValidationError:
            return NEUTRAL_MOOD

    def get_history(self, since_days=None):
        history = self._load_history()
        if since_days is None:
            return tuple(history)
        cutoff = self._clock() - timedelta(days=since_days)
        return tuple(e for e in history if e.timestamp >= cutoff)
