"""Tests for narrated activity tracks."""

from __future__ import annotations

import pytest

from wellnest import narration
from wellnest.catalog import ACTIVITIES, find_activity


@pytest.fixture()
def meditation():
    return find_activity(ACTIVITIES, "11")


def test_activity_without_audio_has_no_track(tmp_path):
    assert narration.ensure_track(find_activity(ACTIVITIES, "1"), tmp_path) is None


def test_existing_track_is_reused(tmp_path, meditation, monkeypatch):
    (tmp_path / "meditation.mp3").write_bytes(b"ID3")
    monkeypatch.setattr(narration, "text_to_speech", lambda *a, **k: pytest.fail("should not synthesize"))
    assert narration.ensure_track(meditation, tmp_path) == tmp_path / "meditation.mp3"


def test_missing_track_is_narrated(tmp_path, meditation, monkeypatch):
    spoken = []

    def fake_tts(text, lang="en"):
        spoken.append((text, lang))
        return b"ID3fake"

    monkeypatch.setattr(narration, "text_to_speech", fake_tts)
    path = narration.ensure_track(meditation, tmp_path / "audio", lang="fr")
    assert path.read_bytes() == b"ID3fake"
    assert spoken[0][1] == "fr"
    assert spoken[0][0].startswith("Mindfulness Meditation.")


def test_failed_narration_leaves_no_file(tmp_path, meditation, monkeypatch):
    monkeypatch.setattr(narration, "text_to_speech", lambda *a, **k: None)
    path = narration.ensure_track(meditation, tmp_path)
    assert path == tmp_path / "meditation.mp3"
    assert not path.exists()


def test_synthesis_can_be_disabled(tmp_path, meditation, monkeypatch):
    monkeypatch.setattr(narration, "text_to_speech", lambda *a, **k: pytest.fail("disabled"))
    assert not narration.ensure_track(meditation, tmp_path, synthesize=False).exists()


def test_text_to_speech_failure_returns_none(monkeypatch):
    import gtts

    class Broken:
        def __init__(self, *a, **k):
            raise RuntimeError("offline")

    monkeypatch.setattr(gtts, "gTTS", Broken)
    assert narration.text_to_speech("hello") is None
