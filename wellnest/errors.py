"""Exceptions raised by the wellnest core."""


class WellnestError(Exception):
    """Base class for every error the core raises on purpose."""


class ValidationError(WellnestError):
    """Bad user input, e.g. a mood outside 1..5 or no mood at all."""


class UnknownGoalError(WellnestError):
    def __init__(self, goal_id):
        super().__init__(f"Unknown goal id: {goal_id!r}")
        self.goal_id = goal_id


class CatalogEmptyError(WellnestError):
    """The activity catalog has nothing to recommend. Configuration problem."""

    def __init__(self, message="The activity catalog is empty"):
        super().__init__(message)


class CatalogError(WellnestError):
    """A catalog file could not be parsed into activities."""


class MediaError(WellnestError):
    """An audio resource is missing or cannot be decoded."""
