"""Wellnest: mood check-ins, adaptive wellness activities and trends."""
from .audio import AudioPlaybackController, LocalAudioMedia, PlaybackMode, PlaybackState, audio_mime, format_time
from .catalog import ACTIVITIES, Activity, Difficulty, load_catalog
from .config import Config, configure_logging
from .dashboard import DashboardMetrics, RiskLevel, compute_metrics, recent_moods
from .errors import (
    CatalogEmptyError,
    CatalogError,
    MediaError,
    UnknownGoalError,
    ValidationError,
    WellnestError,
)
from .moods import MOOD_OPTIONS, MoodEntry, MoodStateStore
from .recommend import CompletionRecord, RecommendationEngine, select_goal
from .scheduling import AsyncioScheduler, ManualScheduler
from .storage import MemoryStore, SettingsStore
from .voice import GroqSpeechCapture, VoiceCaptureBuffer, merge_notes

__version__ = "0.1.0"

__all__ = [
    "ACTIVITIES",
    "Activity",
    "AsyncioScheduler",
    "AudioPlaybackController",
    "CatalogEmptyError",
    "CatalogError",
    "CompletionRecord",
    "Config",
    "DashboardMetrics",
    "Difficulty",
    "GroqSpeechCapture",
    "LocalAudioMedia",
    "ManualScheduler",
    "MediaError",
    "MemoryStore",
    "MOOD_OPTIONS",
    "MoodEntry",
    "MoodStateStore",
    "PlaybackMode",
    "PlaybackState",
    "RecommendationEngine",
    "RiskLevel",
    "SettingsStore",
    "UnknownGoalError",
    "ValidationError",
    "VoiceCaptureBuffer",
    "WellnestError",
    "compute_metrics",
    "configure_logging",
    "audio_mime",
    "format_time",
    "load_catalog",
    "merge_notes",
    "recent_moods",
    "select_goal",
]
