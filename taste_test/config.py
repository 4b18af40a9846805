"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_STATE_FILE = Path.home() / ".taste_test" / "state.json"
DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024


class ConfigError(RuntimeError):
    """Raised when API credentials are missing. Startup must stop."""


def _coerce_int(value: Optional[str], fallback: int) -> int:
    try:
        return int(value) if value is not None else fallback
    except ValueError:
        return fallback


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str]
    openai_model: str
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    state_file: Path
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    tesseract_lang: str = "eng"
    port: int = 10000

    def missing_credentials(self) -> list[str]:
        missing = []
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


def load_settings() -> Settings:
    """Load settings from the environment with safe defaults."""
    state_file = os.getenv("TASTE_TEST_STATE_FILE")

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY"),
        state_file=Path(state_file).expanduser() if state_file else DEFAULT_STATE_FILE,
        max_image_bytes=_coerce_int(os.getenv("MAX_IMAGE_BYTES"), DEFAULT_MAX_IMAGE_BYTES),
        tesseract_lang=os.getenv("TESSERACT_LANG", "eng"),
        port=_coerce_int(os.getenv("PORT"), 10000),
    )


def require_credentials(settings: Settings) -> Settings:
    """
    Refuse to run without API credentials.

    Every other failure in the app degrades quietly; this one halts startup.
    """
    missing = settings.missing_credentials()
    if missing:
        raise ConfigError(f"Missing or invalid configuration: {', '.join(missing)}")
    return settings
