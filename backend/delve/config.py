"""
Configuration - environment-driven settings

Values are read on every call so tests can override them with
monkeypatched environment variables.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent
DEFAULT_ADVENTURES_DIR = PACKAGE_DIR / "adventures"


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default
    if value < 0:
        logger.warning(f"Negative {name}={raw!r}, using default {default}")
        return default
    return value


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default
    if value < 1:
        logger.warning(f"Non-positive {name}={raw!r}, using default {default}")
        return default
    return value


def get_adventure_id() -> str:
    """Get the adventure content to load"""
    return os.getenv("DELVE_ADVENTURE", "dungeon-delve")


def get_adventures_dir() -> Path:
    """Get the directory holding adventure YAML files"""
    return Path(os.getenv("DELVE_ADVENTURES_DIR", str(DEFAULT_ADVENTURES_DIR)))


def get_thinking_delay() -> float:
    """Seconds an enemy deliberates before acting"""
    return _get_float("DELVE_THINKING_DELAY", 2.0)


def get_hit_delay() -> float:
    """Seconds the hit marker stays visible"""
    return _get_float("DELVE_HIT_DELAY", 0.6)


def get_broadcast_buffer() -> int:
    """Capacity of the shared broadcast buffer"""
    return _get_int("DELVE_BROADCAST_BUFFER", 64)


def get_log_level() -> str:
    """Root log level name"""
    return os.getenv("DELVE_LOG_LEVEL", "INFO").upper()


def get_cors_origins() -> list[str]:
    """Origins allowed to call the API"""
    raw = os.getenv("DELVE_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_eleven_labs_api_key() -> str | None:
    """Eleven Labs API key, if configured"""
    return os.getenv("ELEVEN_LABS_API_KEY") or None


def get_eleven_labs_voice_id() -> str:
    """Default Eleven Labs voice"""
    return os.getenv("ELEVEN_LABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM")


def get_host() -> str:
    """Interface the server binds to"""
    return os.getenv("DELVE_HOST", "127.0.0.1")


def get_port() -> int:
    """Port the server listens on"""
    return _get_int("DELVE_PORT", 8000)
