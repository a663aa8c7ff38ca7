# server/config.py
"""Environment-driven settings for the StudySafe backend."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# .../studysafe/server
BASE_DIR = Path(__file__).resolve().parent
# .../studysafe
ROOT_DIR = BASE_DIR.parent

# Package-level .env first, then whatever the process cwd provides
load_dotenv(ROOT_DIR / ".env")
load_dotenv()

DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_MODEL = "claude-3-5-haiku-latest"
DEFAULT_MAX_TOKENS = 700
DEFAULT_TEMPERATURE = 0.4


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        print(f"[config] Ignoring invalid {name}={raw!r}; using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    @property
    def remote_enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def key_prefix(self) -> str:
        if not self.api_key:
            return "(none)"
        return self.api_key[:8] + "..." if len(self.api_key) >= 8 else "(short key)"


def load_settings() -> Settings:
    """Read the remote-model settings from the current environment."""
    return Settings(
        api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        base_url=os.getenv("ANTHROPIC_BASE_URL") or DEFAULT_BASE_URL,
        model=os.getenv("ANTHROPIC_MODEL") or DEFAULT_MODEL,
        max_tokens=_env_number("STUDYSAFE_MAX_TOKENS", DEFAULT_MAX_TOKENS, int),
        temperature=_env_number("STUDYSAFE_TEMPERATURE", DEFAULT_TEMPERATURE, float),
    )
