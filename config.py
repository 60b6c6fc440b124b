"""
config.py - Environment-driven settings.

Values come from the process environment, optionally seeded from a local
.env file. Every module reads these constants instead of calling os.getenv
on its own.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

try:
    load_dotenv()
except UnicodeDecodeError:
    # Fallback for legacy Windows-encoded .env files.
    load_dotenv(encoding="cp1252")

TRUE_VALUES = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUE_VALUES


# -- Logging --
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
LOG_JSON = env_flag("LOG_JSON")

# -- Field dictionary --
# Optional JSON object of extra alias -> canonical name entries.
FIELD_DICTIONARY_PATH = os.getenv("FIELD_DICTIONARY_PATH", "").strip()

# -- HTTP layer --
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
DEBUG = env_flag("DEBUG")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
] or ["*"]
