"""Playback for guided audio activities.

``AudioPlaybackController`` is one state machine for both real and simulated
playback. When the media collaborator cannot play (missing file, decode error,
or no media at all) the controller quietly switches to a one-second tick that
advances the position until ``fallback_cap`` is reached.
"""
import enum
import logging
import math
import wave
from concurrent.futures import Future
from pathlib import Path

from .errors import MediaError
from .scheduling import ManualScheduler

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_CAP = 300
MEDIA_EVENTS = ("timeupdate", "loadedmetadata", "ended")


class PlaybackState(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class PlaybackMode(enum.Enum):
    REAL = "real"
    SIMULATED = "simulated"


def format_time(seconds):
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


AUDIO_MIME = {".mp3": "audio/mpeg", ".wav": "audio/wav", ".ogg": "audio/ogg"}


def audio_mime(path):
    """MIME type for a local track, judged by its extension."""
    return AUDIO_MIME.get(Path(path).suffix.lower(), "audio/mpeg")


def clamp_volume(value):
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


# -------------------- media collaborator --------------------

class LocalAudioMedia:
    """Media element for an audio file on disk.

    ``play()`` returns a future that fails with MediaError when the file is
    missing or unreadable. WAV durations come from the header; other formats
    use ``duration_hint`` (0 means unknown). The media clock runs on the given
    scheduler and emits ``timeupdate`` once per tick.
    """

    def __init__(self, path, scheduler, duration_hint=0.0, tick_seconds=1.0):
        self.path = Path(path) if path else None
        self.current_time = 0.0
        self.duration = 0.0
        self.volume = 1.0
        self._scheduler = scheduler
        self._duration_hint = max(0.0, float(duration_hint or 0))
        self._tick_seconds = tick_seconds
        self._listeners = {event: [] for event in MEDIA_EVENTS}
        self._clock = None

    def subscribe(self, event, callback):
        if event not in self._listeners:
            raise ValueError(f"Unknown media event {event!r}")
        self._listeners[event].append(callback)

        def unsubscribe():
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)
        return unsubscribe

    def _emit(self, event):
        for callback in list(self._listeners[event]):
            callback()

    def _probe(self):
        if self.path is None or not self.path.is_file():
            raise MediaError(f"Audio file not found: {self.path}")
        if self.path.suffix.lower() == ".wav":
            try:
                with wave.open(str(self.path), "rb") as wav:
                    rate = wav.getframerate()
                    return wav.getnframes() / rate if rate else 0.0
            except (wave.Error, EOFError) as e:
                raise MediaError(f"Cannot decode {self.path}: {e}") from e
        if self.path.stat().st_size == 0:
            raise MediaError(f"Audio file is empty: {self.path}")
        return self._duration_hint

    def play(self):
        result = Future()
        try:
            duration = self._probe()
        except (OSError, MediaError) as e:
            result.set_exception(e if isinstance(e, MediaError) else MediaError(str(e)))
            return result
        if duration != self.duration:
            self.duration = duration
            self._emit("loadedmetadata")
        if self.duration and self.current_time >= self.duration:
            self.current_time = 0.0
        self._stop_clock()
        self._clock = self._scheduler.call_later(self._tick_seconds, self._on_clock)
        result.set_result(None)
        return result

    def pause(self):
        self._stop_clock()

    def _stop_clock(self):
        if self._clock is not None:
            self._clock.cancel()
            self._clock = None

    def _on_clock(self):
        self._clock = None
        self.current_time += self._tick_seconds
        if self.duration and self.current_time >= self.duration:
            self.current_time = self.duration
            self._emit("timeupdate")
            self._emit("ended")
            return
        self._emit("timeupdate")
        self._clock = self._scheduler.call_later(self._tick_seconds, self._on_clock)


# -------------------- state machine --------------------

class AudioPlaybackController:
    """Playback session for one visible activity.

    Only one tick or media subscription is ever live; anything started
    cancels the previous one first. ``pause`` and ``reset`` cancel before
    returning, and callbacks from superseded play attempts are ignored.
    """

    def __init__(self, resource, media=None, scheduler=None,
                 fallback_cap=DEFAULT_FALLBACK_CAP, tick_seconds=1.0, volume=0.7):
        self.resource = resource
        self.fallback_cap = fallback_cap
        self.tick_seconds = tick_seconds
        self.position = 0
        self.duration = 0.0
        self.state = PlaybackState.IDLE
        self.mode = PlaybackMode.REAL
        self.volume = 0.0
        self._media = media
        self._scheduler = scheduler or ManualScheduler()
        self._active = None
        self._generation = 0
        self.set_volume(volume)

    def __repr__(self):
        return (f"<AudioPlaybackController {self.resource!r} {self.state.value}"
                f"({self.mode.value}) {format_time(self.position)}>")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def playing(self):
        return self.state is PlaybackState.PLAYING

    @property
    def display_duration(self):
        return self.duration if self.duration > 0 else self.fallback_cap

    @property
    def progress(self):
        total = self.display_duration
        if total <= 0:
            return 0.0
        return min(100.0, self.position / total * 100)

    # ---- transitions ----

    def play(self):
        if self.state is PlaybackState.PLAYING:
            return
        if self.state is PlaybackState.ENDED:
            self.position = 0
            if self._media is not None:
                self._media.current_time = 0.0
        self._cancel_active()
        self._generation += 1
        generation = self._generation
        self.state = PlaybackState.PLAYING

        if self._media is None:
            self._start_simulated("no media")
            return

        self.mode = PlaybackMode.REAL
        self._subscribe_media(generation)
        try:
            result = self._media.play()
        except Exception as e:
            self._play_failed(generation, e)
            return
        result.add_done_callback(lambda fut: self._play_settled(generation, fut))

    def pause(self):
        if self.state is not PlaybackState.PLAYING:
            return
        self._generation += 1
        self._cancel_active()
        if self.mode is PlaybackMode.REAL and self._media is not None:
            self._media.pause()
        self.state = PlaybackState.PAUSED
        logger.debug("Paused %s at %s", self.resource, format_time(self.position))

    def reset(self):
        self._generation += 1
        self._cancel_active()
        if self._media is not None:
            self._media.pause()
            self._media.current_time = 0.0
        self.position = 0
        self.state = PlaybackState.IDLE if self.state is PlaybackState.IDLE else PlaybackState.PAUSED

    def set_volume(self, value):
        self.volume = clamp_volume(value)
        if self._media is not None:
            self._media.volume = self.volume

    def close(self):
        """Tear the session down when its activity leaves the screen."""
        self.reset()
        self._media = None

    # ---- internals ----

    def _cancel_active(self):
        cancel, self._active = self._active, None
        if cancel is not None:
            cancel()

    def _is_current(self, generation):
        return generation == self._generation and self.state is PlaybackState.PLAYING

    def _play_settled(self, generation, fut):
        if not self._is_current(generation):
            return
        if fut.cancelled():
            self._play_failed(generation, MediaError("playback cancelled"))
            return
        error = fut.exception()
        if error is not None:
            self._play_failed(generation, error)
            return
        logger.debug("Playing %s from media", self.resource)

    def _play_failed(self, generation, error):
        if not self._is_current(generation):
            return
        self._cancel_active()
        self._start_simulated(error)

    def _start_simulated(self, reason):
        logger.info("Real playback unavailable for %s (%s), simulating", self.resource, reason)
        self.mode = PlaybackMode.SIMULATED
        if self.position >= self.fallback_cap:
            self.position = 0
        self._schedule_tick()

    def _schedule_tick(self):
        handle = self._scheduler.call_later(self.tick_seconds, self._on_tick, self._generation)
        self._active = handle.cancel

    def _on_tick(self, generation):
        if not self._is_current(generation):
            return
        self._active = None
        self.position = min(self.position + 1, self.fallback_cap)
        if self.position >= self.fallback_cap:
            self._finish()
        else:
            self._schedule_tick()

    def _subscribe_media(self, generation):
        media = self._media
        unsubscribers = [
            media.subscribe("timeupdate", lambda: self._on_time_update(generation)),
            media.subscribe("loadedmetadata", lambda: self._on_metadata(generation)),
            media.subscribe("ended", lambda: self._on_media_ended(generation)),
        ]

        def cancel():
            for unsubscribe in unsubscribers:
                unsubscribe()
        self._active = cancel

    def _on_time_update(self, generation):
        if not self._is_current(generation) or self.mode is not PlaybackMode.REAL:
            return
        limit = max(self.duration, self.fallback_cap)
        self.position = min(max(0.0, float(self._media.current_time)), limit)
        if self.duration > 0 and self.position >= self.duration:
            self.position = self.duration
            self._finish()

    def _on_metadata(self, generation):
        if generation != self._generation:
            return
        duration = float(self._media.duration or 0)
        self.duration = duration if duration > 0 and not math.isinf(duration) else 0.0

    def _on_media_ended(self, generation):
        if not self._is_current(generation):
            return
        if self.duration > 0:
            self.position = self.duration
        self._finish()

    def _finish(self):
        self._cancel_active()
        self.state = PlaybackState.ENDED
        logger.debug("Finished %s (%s)", self.resource, self.mode.value)
