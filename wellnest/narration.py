"""Spoken narration for audio activities, rendered with gTTS."""
import io
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def text_to_speech(text, lang="en"):
    """MP3 bytes for ``text``, or None if gTTS cannot reach its service."""
    try:
        from gtts import gTTS
        tts = gTTS(text=text, lang=lang)
        buf = io.BytesIO()
        tts.write_to_fp(buf)
        return buf.getvalue()
    except Exception as e:
        logger.warning("TTS error: %s", e)
        return None


def narration_script(activity):
    return f"{activity.title}. {activity.description} Take your time. You're doing great."


def ensure_track(activity, audio_dir, lang="en", synthesize=True):
    """Path of the activity's audio file, narrating it first if it is missing.

    Returns None for activities without audio. A path is returned even when
    synthesis fails; playback then falls back to simulation.
    """
    if not activity.has_audio:
        return None
    path = Path(audio_dir) / activity.audio
    if path.is_file() or not synthesize:
        return path
    audio = text_to_speech(narration_script(activity), lang=lang)
    if audio:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(audio)
            logger.info("Narrated %s into %s", activity.id, path)
        except OSError as e:
            logger.warning("Could not save narration for %s: %s", activity.id, e)
    return path
