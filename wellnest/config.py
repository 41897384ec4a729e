"""Runtime configuration read from environment variables."""
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _get_bool(environ, key, default):
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _get_number(environ, key, default, kind):
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return kind(raw.strip())
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


@dataclass
class Config:
    db_path: Path = Path("wellnest.db")
    audio_dir: Path = Path("audio")
    fallback_cap: int = 300
    tick_seconds: float = 1.0
    default_volume: float = 0.7
    narration_enabled: bool = True
    tts_lang: str = "en"
    groq_api_key: Optional[str] = None
    transcribe_model: str = "whisper-large-v3-turbo"
    log_level: str = "INFO"
    catalog_path: Optional[Path] = None

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        cfg = cls(
            db_path=Path(env.get("WELLNEST_DB", "wellnest.db")).expanduser(),
            audio_dir=Path(env.get("WELLNEST_AUDIO_DIR", "audio")).expanduser(),
            fallback_cap=_get_number(env, "WELLNEST_FALLBACK_CAP", 300, int),
            default_volume=_get_number(env, "WELLNEST_VOLUME", 0.7, float),
            narration_enabled=_get_bool(env, "WELLNEST_NARRATION", True),
            tts_lang=env.get("WELLNEST_TTS_LANG", "en"),
            groq_api_key=env.get("GROQ_API_KEY") or None,
            transcribe_model=env.get("WELLNEST_TRANSCRIBE_MODEL", "whisper-large-v3-turbo"),
            log_level=env.get("WELLNEST_LOG_LEVEL", "INFO").upper(),
            catalog_path=Path(env["WELLNEST_CATALOG"]).expanduser() if env.get("WELLNEST_CATALOG") else None,
        )
        cfg.validate()
        return cfg

    def validate(self):
        errors = []
        if self.fallback_cap <= 0:
            errors.append("WELLNEST_FALLBACK_CAP must be positive")
        if not 0.0 <= self.default_volume <= 1.0:
            errors.append("WELLNEST_VOLUME must be between 0 and 1")
        if self.log_level not in logging.getLevelNamesMapping():
            errors.append(f"WELLNEST_LOG_LEVEL {self.log_level!r} is not a logging level")
        if errors:
            raise ValueError("Invalid configuration:\n" + "\n".join(f"- {e}" for e in errors))


def configure_logging(level="INFO"):
    """Send wellnest logs to stdout. Safe to call on every Streamlit rerun."""
    root = logging.getLogger("wellnest")
    root.setLevel(level)
    if not any(getattr(h, "_wellnest", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._wellnest = True
        root.addHandler(handler)
    return root
