"""Voice notes: speech fragments folded into a pending journal note."""
import logging
import os
import tempfile

from groq import Groq

logger = logging.getLogger(__name__)


class VoiceCaptureBuffer:
    """Working buffer for transcription fragments.

    Interim fragments are appended, not replaced, and nothing is
    de-duplicated: an engine that re-sends a growing interim result will
    repeat words. Without a speech capability every method is a no-op.
    """

    def __init__(self, capture=None, available=None):
        if available is None:
            available = capture is not None and capture.is_available()
        self.available = bool(available)
        self._parts = []
        if self.available and capture is not None:
            capture.subscribe("fragment", self.on_fragment)

    def on_fragment(self, text, is_final):
        if not self.available:
            return
        text = (text or "").strip()
        if text:
            self._parts.append(text)

    def commit(self):
        if not self.available:
            return ""
        return " ".join(self._parts)

    def clear(self):
        if not self.available:
            return
        self._parts = []

    def __bool__(self):
        return bool(self._parts)


def merge_notes(manual, spoken):
    """Typed notes first, then the spoken ones."""
    return " ".join(p for p in ((manual or "").strip(), (spoken or "").strip()) if p)


class GroqSpeechCapture:
    """Speech-capture collaborator on top of Groq's Whisper transcription.

    Each recorded clip passed to ``feed`` comes back as one final fragment.
    """

    def __init__(self, api_key=None, model="whisper-large-v3-turbo", client=None):
        self.api_key = api_key
        self.model = model
        self._client = client
        self._listeners = {"fragment": [], "end": []}
        self.active = False

    def is_available(self):
        return self._client is not None or bool(self.api_key)

    def _get_client(self):
        if self._client is None:
            self._client = Groq(api_key=self.api_key)
        return self._client

    def subscribe(self, event, callback):
        self._listeners[event].append(callback)

    def start(self):
        self.active = True

    def stop(self):
        if self.active:
            self.active = False
            for callback in list(self._listeners["end"]):
                callback()

    def transcribe(self, audio_bytes, suffix=".wav"):
        """Return the transcript of one clip, or None when transcription fails."""
        path = None
        try:
            with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
                tmp.write(audio_bytes)
                path = tmp.name
            with open(path, "rb") as file:
                result = self._get_client().audio.transcriptions.create(model=self.model, file=file)
            return (result.text or "").strip()
        except Exception as e:
            logger.warning("Transcription failed: %s", e)
            return None
        finally:
            if path and os.path.exists(path):
                os.unlink(path)

    def feed(self, audio_bytes):
        if not self.active or not audio_bytes:
            return None
        text = self.transcribe(audio_bytes)
        if text:
            for callback in list(self._listeners["fragment"]):
                callback(text, True)
        return text
