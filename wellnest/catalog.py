"""The static catalog of wellness activities."""
import enum
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import CatalogError


class Difficulty(enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    CHALLENGING = "challenging"


@dataclass(frozen=True)
class Activity:
    id: str
    title: str
    description: str
    category: str
    duration: str
    difficulty: Difficulty
    mood_tags: frozenset = field(default_factory=frozenset)
    audio: Optional[str] = None

    @property
    def has_audio(self):
        return self.audio is not None

    @property
    def duration_seconds(self):
        return parse_duration(self.duration)


def parse_duration(text):
    """'10 min' -> 600, '1 h 30 min' -> 5400, anything unreadable -> 0."""
    total = 0
    for amount, unit in re.findall(r"(\d+)\s*(h|hr|hour|hours|m|min|mins|minutes|s|sec|seconds)\b", text or ""):
        n = int(amount)
        if unit.startswith("h"):
            total += n * 3600
        elif unit.startswith("m"):
            total += n * 60
        else:
            total += n
    return total


def id_sort_key(activity_id):
    # numeric ids sort numerically, others after them alphabetically
    return (0, int(activity_id), "") if activity_id.isdigit() else (1, 0, activity_id)


ACTIVITIES = (
    # Great mood (5)
    Activity("1", "Share Your Joy",
             "Write down three things that made you happy today and share one with a friend or family member.",
             "Social Connection", "15 min", Difficulty.EASY, frozenset({5})),
    Activity("2", "Gratitude Letter",
             "Write a heartfelt thank-you note to someone who has positively impacted your life.",
             "Gratitude", "30 min", Difficulty.MEDIUM, frozenset({5, 4})),
    # Good mood (4)
    Activity("3", "Mindful Movement",
             "Take a 10-minute walk outdoors and practice mindful observation of your surroundings.",
             "Physical Wellness", "10 min", Difficulty.EASY, frozenset({4, 5})),
    Activity("4", "Creative Expression",
             "Spend 20 minutes on a creative activity: draw, write, sing, or craft something new.",
             "Self-Expression", "20 min", Difficulty.MEDIUM, frozenset({4, 5})),
    # Okay mood (3)
    Activity("5", "Gentle Self-Care",
             "Practice a simple self-care routine: take a warm shower, listen to calming music, or enjoy herbal tea.",
             "Self-Care", "25 min", Difficulty.EASY, frozenset({3, 2})),
    Activity("6", "Breathing Reset",
             "Try the 4-7-8 breathing technique for 5 minutes to center yourself and reduce stress.",
             "Mindfulness", "5 min", Difficulty.EASY, frozenset({3, 2, 1}), audio="breathing.mp3"),
    # Low mood (2)
    Activity("7", "Micro-Accomplishment",
             "Complete one small, manageable task like organizing your desk or making your bed.",
             "Achievement", "10 min", Difficulty.EASY, frozenset({2, 1})),
    Activity("8", "Comfort Connection",
             "Reach out to someone you trust - send a text, make a call, or spend time with a supportive person.",
             "Social Support", "15 min", Difficulty.MEDIUM, frozenset({2, 1})),
    # Anxious (1)
    Activity("9", "Grounding Exercise",
             "Use the 5-4-3-2-1 technique: name 5 things you see, 4 you can touch, 3 you hear, 2 you smell, 1 you taste.",
             "Anxiety Relief", "5 min", Difficulty.EASY, frozenset({1})),
    Activity("10", "Soothing Routine",
             "Create a calming environment: dim lights, play soft music, and practice gentle stretches or deep breathing.",
             "Relaxation", "20 min", Difficulty.EASY, frozenset({1, 2})),
    # Guided audio
    Activity("11", "Mindfulness Meditation",
             "A 10-minute guided meditation to help reduce stress and improve focus.",
             "Mental Health", "10 min", Difficulty.EASY, frozenset({1, 2, 3}), audio="meditation.mp3"),
    Activity("12", "Evening Wind-Down",
             "Create a calming bedtime routine to improve sleep quality and reduce anxiety.",
             "Sleep", "45 min", Difficulty.MEDIUM, frozenset({2, 3}), audio="sleep.mp3"),
    Activity("13", "Nature Sounds",
             "Listen to calming rain sounds or forest ambiance to reduce stress levels.",
             "Relaxation", "25 min", Difficulty.EASY, frozenset({1, 3, 4}), audio="nature.mp3"),
    Activity("14", "Journaling Exercise",
             "Write down three things you're grateful for and one challenge you overcame today.",
             "Reflection", "20 min", Difficulty.CHALLENGING, frozenset({3, 4})),
)


def _activity_from_dict(raw):
    try:
        tags = frozenset(int(t) for t in raw.get("mood_tags", []))
        if any(not 1 <= t <= 5 for t in tags):
            raise CatalogError(f"Activity {raw.get('id')!r} has mood tags outside 1..5")
        return Activity(
            id=str(raw["id"]),
            title=raw["title"],
            description=raw.get("description", ""),
            category=raw.get("category", ""),
            duration=raw.get("duration", ""),
            difficulty=Difficulty(raw.get("difficulty", "easy")),
            mood_tags=tags,
            audio=raw.get("audio"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"Bad activity record {raw!r}: {e}") from e


def load_catalog(path=None):
    """Load activities from a JSON list, or return the built-in catalog."""
    if path is None:
        return ACTIVITIES
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CatalogError(f"Could not read catalog {path}: {e}") from e
    if not isinstance(data, list):
        raise CatalogError(f"Catalog {path} must contain a JSON list")
    activities = tuple(_activity_from_dict(r) for r in data)
    ids = [a.id for a in activities]
    if len(set(ids)) != len(ids):
        raise CatalogError(f"Catalog {path} has duplicate activity ids")
    return activities


def find_activity(catalog, activity_id):
    for activity in catalog:
        if activity.id == activity_id:
            return activity
    return None
