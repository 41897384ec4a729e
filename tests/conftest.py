"""Shared fixtures: in-memory store, fixed clock, fake media."""

from __future__ import annotations

import random
from concurrent.futures import Future
from datetime import datetime, timedelta, timezone

import pytest

from wellnest.errors import MediaError
from wellnest.scheduling import ManualScheduler
from wellnest.storage import MemoryStore

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMedia:
    """Media element whose play result the test controls."""

    def __init__(self, fail: bool = False, settle: bool = True):
        self.fail = fail
        self.settle = settle
        self.current_time = 0.0
        self.duration = 0.0
        self.volume = 1.0
        self.play_calls = 0
        self.pause_calls = 0
        self.last_result: Future | None = None
        self._listeners: dict[str, list] = {"timeupdate": [], "loadedmetadata": [], "ended": []}

    def subscribe(self, event, callback):
        self._listeners[event].append(callback)

        def unsubscribe():
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)
        return unsubscribe

    def listener_count(self) -> int:
        return sum(len(v) for v in self._listeners.values())

    def emit(self, event: str) -> None:
        for cb in list(self._listeners[event]):
            cb()

    def play(self) -> Future:
        self.play_calls += 1
        result: Future = Future()
        self.last_result = result
        if self.settle:
            if self.fail:
                result.set_exception(MediaError("no such file"))
            else:
                result.set_result(None)
        return result

    def pause(self) -> None:
        self.pause_calls += 1


@pytest.fixture()
def kv() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()
