"""Mood-driven activity selection and completion tracking."""
import logging
import random
from dataclasses import dataclass
from datetime import datetime

from .catalog import find_activity, id_sort_key
from .errors import CatalogEmptyError, UnknownGoalError
from .moods import now_local

logger = logging.getLogger(__name__)

COMPLETED_KEY = "completed_goal_ids"


@dataclass(frozen=True)
class CompletionRecord:
    goal_id: str
    completed_at: datetime


def _tag_distance(activity, mood):
    if not activity.mood_tags:
        return None
    return min(abs(tag - mood) for tag in activity.mood_tags)


def candidates_for(catalog, mood):
    """Activities tagged with ``mood``, else the ones with the nearest tag.

    Returned in ascending id order.
    """
    if not catalog:
        raise CatalogEmptyError()
    ranked = []
    for activity in catalog:
        dist = _tag_distance(activity, mood)
        if dist is not None:
            ranked.append((dist, id_sort_key(activity.id), activity))
    if not ranked:
        # nothing is tagged at all, every activity is equally close
        return sorted(catalog, key=lambda a: id_sort_key(a.id))
    ranked.sort(key=lambda r: (r[0], r[1]))
    nearest = ranked[0][0]
    return [activity for dist, _, activity in ranked if dist == nearest]


def select_goal(catalog, mood, exclude_ids=(), rng=None):
    """Pick an activity for ``mood``, avoiding ``exclude_ids`` when possible."""
    rng = rng or random
    candidates = candidates_for(catalog, mood)
    excluded = set(exclude_ids or ())
    remaining = [a for a in candidates if a.id not in excluded]
    if not remaining:
        # every candidate was already done: repeat rather than return nothing
        remaining = candidates
    return rng.choice(remaining)


class RecommendationEngine:
    def __init__(self, catalog, moods, kv, rng=None, clock=None, notify=None):
        if not catalog:
            raise CatalogEmptyError()
        self.catalog = tuple(catalog)
        self._moods = moods
        self._kv = kv
        self._rng = rng or random.Random()
        self._clock = clock or now_local
        self._notify = notify
        self.completions = []
        self.current_goal = None

    @property
    def session_completed_ids(self):
        return [r.goal_id for r in self.completions]

    def select_goal(self, mood=None, exclude_ids=None):
        if mood is None:
            mood = self._moods.get_current_mood()
        if exclude_ids is None:
            exclude_ids = self.session_completed_ids
        goal = select_goal(self.catalog, mood, exclude_ids, self._rng)
        self.current_goal = goal
        logger.debug("Selected goal %s for mood %d", goal.id, mood)
        return goal

    def mark_complete(self, goal_id):
        """Record a completion and move on to the next goal, which is returned."""
        if find_activity(self.catalog, goal_id) is None:
            raise UnknownGoalError(goal_id)
        record = CompletionRecord(goal_id=goal_id, completed_at=self._clock())
        self.completions.append(record)

        self._kv.append(COMPLETED_KEY, goal_id)

        logger.info("Goal %s completed", goal_id)
        if self._notify:
            self._notify("Goal Completed! 🎉",
                         "Amazing work! You're taking great care of your mental health.",
                         "success")
        return self.select_goal(exclude_ids=self.session_completed_ids)

    def completed_today(self):
        today = self._clock().date()
        return sum(1 for r in self.completions if r.completed_at.date() == today)

    def completed_all_time(self):
        """Ids of every goal ever completed on this store, oldest first."""
        return self._kv.get_list(COMPLETED_KEY)
